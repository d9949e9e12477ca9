"""Contact form endpoint: forwards visitor messages to the admin mailbox."""

from typing import Annotated

from fastapi import APIRouter, Depends

from userhub.api.deps import get_mailer, rate_limit
from userhub.schemas.common import MessageResponse
from userhub.schemas.user import ContactUsRequest
from userhub.services.mailer import Mailer

router = APIRouter()


@router.post(
    "/contact-us",
    response_model=MessageResponse,
    dependencies=[Depends(rate_limit("customers.contact-us", limit=1, window_sec=60))],
)
def contact_us(
    body: ContactUsRequest,
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> MessageResponse:
    """Send a contact form message to ADMIN_MAIL with Reply-To set to the sender."""
    mailer.send_contact_form(body.email, body.subject, body.message)
    return MessageResponse(
        message="Your email were sent successfully. We will send you a response in 12-48 hours"
    )
