"""
Configuracion y eventos de ciclo de vida de la aplicacion.
"""
