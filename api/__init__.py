"""HTTP layer (FastAPI) over the ipreg registry."""
