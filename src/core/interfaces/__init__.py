"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el dispatcher depende del contrato del
  backend, no de httpx ni de Strapi.
"""
