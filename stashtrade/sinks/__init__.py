"""Destinations for chunks of public stashes: object storage, RabbitMQ, PostgreSQL."""