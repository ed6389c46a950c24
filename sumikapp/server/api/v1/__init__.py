"""Version 1 of the SumikAPP HTTP API, mounted under ``/api/v1``."""
