"""ASS/SSA parsing: timestamps, colours, style translation and override codes."""
