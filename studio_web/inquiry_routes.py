"""Public contact form endpoint"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from studio_cms.services.inquiry_service import InquiryService

from .content_routes import read_json_body
from .responses import success_response

router = APIRouter(prefix="/api/contact", tags=["contact"])


def get_inquiry_service(request: Request) -> InquiryService:
    return request.app.state.inquiry_service


def client_ip(request: Request):
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@router.post("/submit")
async def submit_contact_form(
    request: Request,
    background_tasks: BackgroundTasks,
    service: InquiryService = Depends(get_inquiry_service),
):
    """Validate a contact form submission; the studio is emailed after the response"""
    payload = await read_json_body(request)
    submission = service.accept(payload, ip=client_ip(request), user_agent=request.headers.get("user-agent"))
    background_tasks.add_task(service.deliver, submission)
    return success_response(
        message="Your message has been received successfully. We will get back to you soon!",
        submittedAt=submission["submittedAt"],
    )
