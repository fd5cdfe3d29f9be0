"""Client-side typing logic: API client, transcript state machine, effects planner."""
