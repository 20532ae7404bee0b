"""CAN bus reader interface, controller constants and a simulated reader."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Iterable, Optional

MAX_FRAME_LENGTH = 8
DEFAULT_CAN_ID = 0x100


class Register(IntEnum):
    """Registers of the CAN controller."""

    CANSTAT = 0x0E
    CANCTRL = 0x0F
    BFPCTRL = 0x0C
    TEC = 0x1C
    REC = 0x1D
    CNF3 = 0x28
    CNF2 = 0x29
    CNF1 = 0x2A
    CANINTE = 0x2B
    CANINTF = 0x2C
    EFLG = 0x2D
    TXRTSCTRL = 0x0D
    RXB0CTRL = 0x60
    RXB0SIDH = 0x61
    RXB0SIDL = 0x62
    RXB0DLC = 0x65
    RXB0D0 = 0x66
    RXF0SIDH = 0x00
    RXF0SIDL = 0x01
    RXF1SIDH = 0x04
    RXF1SIDL = 0x05
    RXM0SIDH = 0x20
    RXM0SIDL = 0x21
    RXM1SIDH = 0x24
    RXM1SIDL = 0x25


class CanBitrate(IntEnum):
    """Bit timing settings for the supported bus speeds."""

    KBPS_10 = 0x31
    KBPS_25 = 0x13
    KBPS_50 = 0x09
    KBPS_100 = 0x04
    KBPS_125 = 0x03
    KBPS_250 = 0x01
    KBPS_500 = 0x00


class SpiCommand(IntEnum):
    """SPI instructions understood by the CAN controller."""

    RESET = 0xC0
    READ = 0x03
    WRITE = 0x02
    RTS = 0x80
    RTS_TXB0 = 0x81
    READ_STATUS = 0xA0
    BIT_MODIFY = 0x05


class CanReader(ABC):
    """A device that sends and receives CAN frames."""

    @abstractmethod
    def init(self) -> bool:
        """Prepare the device; return whether it is ready."""

    @abstractmethod
    def send(self, can_id: int, data: bytes) -> bool:
        """Send a frame; return whether it was sent."""

    @abstractmethod
    def receive(self) -> Optional[bytes]:
        """Return the payload of a received frame, or None if there is none."""

    @abstractmethod
    def get_id(self) -> int:
        """Return the identifier of the last received frame."""


class SimulatedCanReader(CanReader):
    """A CAN reader that hands out frames set up in advance."""

    def __init__(self) -> None:
        self._receive_data = b""
        self._can_id = DEFAULT_CAN_ID
        self._should_receive = False
        self._sent: list[tuple[int, bytes]] = []

    def set_receive_data(self, data: Iterable[int]) -> None:
        """Set the payload to hand out; anything past 8 bytes is dropped."""
        self._receive_data = bytes(data)[:MAX_FRAME_LENGTH]

    def set_can_id(self, can_id: int) -> None:
        self._can_id = can_id

    def set_should_receive(self, should_receive: bool) -> None:
        self._should_receive = should_receive

    @property
    def sent_frames(self) -> list[tuple[int, bytes]]:
        """A copy of the frames sent so far, as (identifier, payload)."""
        return list(self._sent)

    def init(self) -> bool:
        return True

    def send(self, can_id: int, data: bytes) -> bool:
        """Record the frame as sent; always succeeds."""
        self._sent.append((can_id, bytes(data)))
        return True

    def receive(self) -> Optional[bytes]:
        if not self._should_receive:
            return None
        return self._receive_data

    def get_id(self) -> int:
        return self._can_id