"""
Pipeline de sincronización one-way: feed de avisos -> base de datos.

Este paquete está diseñado para ejecutarse como job (scheduler / CLI),
no como parte del request/response del API.

Objetivos de diseño:
- Idempotencia: se puede ejecutar N veces sin duplicar avisos (upsert por uuid).
- Incremental: ventana movil sobre `updated` usando el máximo guardado.
- Convergencia: el full sync desaloja lo vencido o ya no publicado.
- Progreso parcial: un fallo a mitad de corrida no deshace lo ya escrito.
"""
