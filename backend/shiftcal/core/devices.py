from shiftcal.core.errors import UnknownDevice
from shiftcal.models.enums import Device


# Display labels for every schedulable device.
# Added a device to the enum -> add its label here, the order below is the UI order.
DEVICE_LABELS: dict[Device, str] = {
    Device.WHITE_PC: "白PC",
    Device.BLACK_PC: "黒PC",
    Device.LAPTOP: "ノートPC",
    Device.MAC1: "Mac1",
    Device.MAC2: "Mac2",
}


def list_devices() -> list[Device]:
    return list(DEVICE_LABELS)


def to_device(value: str) -> Device | None:
    """Registered device for a raw identifier, or None."""
    try:
        device = Device(value)
    except ValueError:
        return None
    return device if device in DEVICE_LABELS else None


def label(device: str) -> str:
    dev = to_device(device)
    if dev is None:
        raise UnknownDevice(f"Unknown device: {device}")
    return DEVICE_LABELS[dev]
