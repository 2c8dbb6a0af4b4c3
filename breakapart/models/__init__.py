"""Host element model, scene state and API payloads."""
