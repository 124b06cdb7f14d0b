"""Application state — controller owning readings/alerts/rules, plus persistence."""
