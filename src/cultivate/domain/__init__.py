"""Pipeline core: model, ports, lifecycle, suggestions and reconciliation."""
