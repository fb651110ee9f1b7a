"""Application bootstrap and the command surface used by the front end."""
