"""Host actions. Importing an action module registers it."""
