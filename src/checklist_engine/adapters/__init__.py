"""Host adapters built on top of the engine."""
