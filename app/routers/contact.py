from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session
from app.db.session import get_session
from app.models.contact import ContactMessage

router = APIRouter()

class ContactRequest(BaseModel):
    name: str
    email: str
    subject: Optional[str] = None
    message: str

@router.post("/", status_code=status.HTTP_201_CREATED)
def send_contact_message(data: ContactRequest, session: Session = Depends(get_session)):
    if not data.name.strip() or not data.email.strip() or not data.message.strip():
        raise HTTPException(status_code=400, detail="Name, email and message are required")
    message = ContactMessage(
        name=data.name.strip(),
        email=data.email.strip(),
        subject=data.subject,
        message=data.message.strip(),
    )
    session.add(message)
    session.commit()
    session.refresh(message)
    return {"success": True, "id": message.id}
