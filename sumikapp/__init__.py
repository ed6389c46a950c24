"""SumikAPP.

Backend for managing On-the-Job Training (OJT) placement and tracking at an
academic institution.

Four roles use the system:

- **trainee**: submits placement forms, requirements and weekly, attendance
  and accomplishment reports.
- **coordinator**: owns sections (program batches), enrolls trainees, reviews
  requirements and placement forms.
- **supervisor**: reviews the reports of the trainees placed at their company
  and submits evaluations.
- **admin**: manages users, industry partners and predefined requirements.

Subpackages
-----------

- ``sumikapp.core``: logging, monitoring, errors, database entities and I/O models.
- ``sumikapp.navigation``: role and OJT-status aware navigation trees.
- ``sumikapp.dashboards``: defensive transformers for dashboard payloads.
- ``sumikapp.prediction``: client for the external employability prediction service.
- ``sumikapp.server``: the FastAPI application, routers and services.
"""

__version__ = "0.1.0"
