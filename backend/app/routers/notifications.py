from fastapi import APIRouter, Depends

from ..notifications import Notifier, get_notifier

router = APIRouter()


@router.get("")
def current_notification(notifier: Notifier = Depends(get_notifier)):
    return {"message": notifier.current()}


@router.delete("")
def dismiss_notification(notifier: Notifier = Depends(get_notifier)):
    notifier.clear()
    return {"message": None}
