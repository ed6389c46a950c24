"""Core building blocks shared by the server and the library modules."""
