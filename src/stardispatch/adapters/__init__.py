"""Adapters – one TransportClient per substrate.

Each adapter guards its third-party import so the package can be installed
with only the extras a service needs (``stardispatch[rabbitmq]`` etc.).
"""
