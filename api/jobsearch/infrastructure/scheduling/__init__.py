"""
Disparo periodico del sync (APScheduler) y lock de corrida.
"""
