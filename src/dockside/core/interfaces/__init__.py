"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite sustituir piezas (p.ej. el resolver de certificados) en tests.
"""
