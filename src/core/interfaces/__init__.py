"""Contratos (Protocol) que implementan los adaptadores.

Por qué:
- El Core depende de abstracciones (p.ej. `SessionStore`), no de ficheros.
"""
