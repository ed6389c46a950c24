"""
API I/O models.

Pydantic schemas that define the contract between the HTTP API and its
clients. Entities never leave the service layer directly; routers convert
them to these ``*Read`` models.
"""
