import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select
from app.db.session import get_session
from app.models.newsletter import NewsletterSubscriber

logger = logging.getLogger(__name__)

router = APIRouter()

class SubscribeRequest(BaseModel):
    email: str

@router.post("/")
def subscribe(data: SubscribeRequest, session: Session = Depends(get_session)):
    email = data.email.strip().lower()
    if "@" not in email:
        raise HTTPException(status_code=400, detail="A valid email is required")

    subscriber = session.exec(select(NewsletterSubscriber).where(NewsletterSubscriber.email == email)).first()
    if subscriber:
        if not subscriber.is_active:
            subscriber.is_active = True
            session.add(subscriber)
            session.commit()
            logger.info("Newsletter subscription reactivated for %s", email)
        return {"success": True, "message": "You're subscribed!"}

    session.add(NewsletterSubscriber(email=email))
    session.commit()
    logger.info("New newsletter subscriber %s", email)
    return {"success": True, "message": "You're subscribed!"}
