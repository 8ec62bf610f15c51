"""Domain types shared by the turn pipeline and the persistence layer."""
