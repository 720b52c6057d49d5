"""Resources bundled on the default classpath."""
