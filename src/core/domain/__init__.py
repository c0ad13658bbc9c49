"""Dominio: entidades del backend, cuerpos de petición y claves de caché.

Por qué aquí:
- Formas puras (Pydantic v2) normalizadas en el borde.
- No conoce httpx, typer ni Rich.
"""
