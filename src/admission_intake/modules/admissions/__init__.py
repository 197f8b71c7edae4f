"""
Admissions Module

Handles the student admission intake flow:
1. Registration with a generated application identifier
2. Login gated on the registration fee
3. Partial updates to an application (fees, hostel, contact details)
4. Document uploads, with profile photos attached to the application

API Endpoints:
- POST /api/register - Register a new applicant
- POST /api/login - Applicant login (mobile + date of birth)
- POST /api/update-application - Update an application
- GET /api/applications/{application_id} - Fetch an application
- POST /api/upload - Upload a document

Mirroring:
- Every record write is projected into a Google Sheet (best-effort)
- Documents are stored in an S3 bucket
"""

from .router import router

__all__ = ["router"]
