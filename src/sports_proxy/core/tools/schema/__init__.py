from .schema_validator import SchemaValidator

__all__ = ["SchemaValidator"]
