"""
Jobsearch: sincronizacion del feed de avisos de empleo hacia PostgreSQL.
"""
