"""Self-contained helper modules used by the privdns sample."""
