"""Grid storage, topology, neighborhoods and the two step implementations."""
