"""WikiChat: retrieval-augmented chat over Wikipedia, served with FastAPI."""
