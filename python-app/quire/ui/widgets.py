"""
Custom UI Widgets for the viewer.
"""

from typing import Optional

from PySide6.QtCore import QPoint, QPointF, Qt, Signal
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QWidget

from ..core.cache import PageImage
from ..core.constants import PixelFormat

_QIMAGE_FORMATS = {
    PixelFormat.RGB888: QImage.Format.Format_RGB888,
    PixelFormat.RGBA8888: QImage.Format.Format_RGBA8888,
}


def to_qimage(image: PageImage) -> QImage:
    """Wraps a page image in a QImage without copying the pixel bytes."""
    buf = image.buffer
    return QImage(
        buf.data, buf.width, buf.height, buf.bytes_per_line, _QIMAGE_FORMATS[buf.format]
    )


class PageView(QWidget):
    """
    Paints one rendered page centred in the widget, shifted by the pan offset.

    Dragging with the left button emits ``pan_requested`` with the mouse
    delta; Ctrl+wheel emits ``zoom_requested`` with +1 or -1.
    """

    pan_requested = Signal(float, float)
    zoom_requested = Signal(int)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._image: Optional[PageImage] = None
        self._qimage: Optional[QImage] = None
        self._pan = QPointF(0.0, 0.0)
        self._message = ""
        self._drag_origin: Optional[QPoint] = None
        self.dark_mode = True
        self.setMinimumSize(200, 200)

    def show_page(self, image: PageImage, pan_x: float, pan_y: float) -> None:
        if image is not self._image:
            self._image = image
            # Holding the PageImage keeps the bytes behind the QImage alive.
            self._qimage = to_qimage(image)
        self._pan = QPointF(pan_x, pan_y)
        self._message = ""
        self.update()

    def show_placeholder(self, message: str) -> None:
        self._image = None
        self._qimage = None
        self._message = message
        self.update()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        bg = QColor(34, 34, 34) if self.dark_mode else QColor(238, 238, 238)
        painter.fillRect(self.rect(), bg)

        if self._qimage is not None:
            x = (self.width() - self._qimage.width()) / 2 + self._pan.x()
            y = (self.height() - self._qimage.height()) / 2 + self._pan.y()
            painter.drawImage(QPointF(x, y), self._qimage)
        elif self._message:
            painter.setPen(QColor("#ddd") if self.dark_mode else QColor("#222"))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, self._message)

        painter.end()

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_origin = event.position().toPoint()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        if self._drag_origin is not None:
            pos = event.position().toPoint()
            delta = pos - self._drag_origin
            self._drag_origin = pos
            self.pan_requested.emit(float(delta.x()), float(delta.y()))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_origin = None
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event) -> None:
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            step = 1 if event.angleDelta().y() > 0 else -1
            self.zoom_requested.emit(step)
            event.accept()
            return
        super().wheelEvent(event)
