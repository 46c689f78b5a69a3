"""
Infrastructure layer: adapters behind the application ports.

- `catalog`: TMDB HTTP client (`MovieCatalogPort`)
- `persistence`: watchlist storage (`WatchlistPersistencePort`)
- `integrations`: command-line entrypoints
"""
