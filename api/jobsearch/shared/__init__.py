"""
Elementos compartidos entre capas: constantes, excepciones y utilidades.
"""
