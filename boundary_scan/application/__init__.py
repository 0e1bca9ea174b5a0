"""
Application Layer

This layer contains use cases (application logic) and DTOs (data transfer objects).
It orchestrates domain logic without containing business rules itself.

Following Clean Architecture principles:
- Use cases coordinate the scan flow (sample, bisect, drain)
- DTOs define request contracts
- Interfaces define dependencies (inverted)
"""
