from __future__ import annotations

from fastapi import APIRouter

from shiftcal.core.devices import DEVICE_LABELS, label, list_devices

router = APIRouter(prefix="/devices", tags=["devices"])


@router.get("")
def get_devices():
    return [{"id": d.value, "label": DEVICE_LABELS[d]} for d in list_devices()]


@router.get("/{device}")
def get_device(device: str):
    return {"id": device, "label": label(device)}
