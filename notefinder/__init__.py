"""notefinder: resolve short study-resource searches against the shared notes sheet."""
