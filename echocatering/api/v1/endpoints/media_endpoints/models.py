from typing import Any

from pydantic import BaseModel

from echocatering.gallery import GridLayout, GridMetrics, TileShape, Viewport


class MediaItem(BaseModel):
    public_id: str
    url: str
    resource_type: str
    format: str | None = None
    bytes: int | None = None
    width: int | None = None
    height: int | None = None
    duration: float | None = None
    created_at: str | None = None

    @classmethod
    def from_resource(cls, resource: dict[str, Any], resource_type: str) -> "MediaItem":
        return cls(
            public_id=resource.get("public_id", ""),
            url=resource["secure_url"],
            resource_type=resource.get("resource_type") or resource_type,
            format=resource.get("format"),
            bytes=resource.get("bytes"),
            width=resource.get("width"),
            height=resource.get("height"),
            duration=resource.get("duration"),
            created_at=resource.get("created_at"),
        )


class LogoPayload(BaseModel):
    content: str
    public_id: str
    title: str = "ECHO Catering Logo"
    alt_text: str = "ECHO Catering Logo"
    created_at: str | None = None


class LayoutTile(BaseModel):
    key: str
    src: str
    public_id: str | None
    shape: TileShape
    grid_column: str
    grid_row: str
    sequence_index: int
    slot_index: int


class GalleryLayoutResponse(BaseModel):
    viewport: Viewport
    tiles: list[LayoutTile]
    columns: int
    rows: int
    sequence_count: int
    sequence_width: int
    image_count: int
    metrics: GridMetrics | None = None
    message: str | None = None

    @classmethod
    def from_layout(
        cls, layout: GridLayout, image_count: int, metrics: GridMetrics | None = None
    ) -> "GalleryLayoutResponse":
        return cls(
            viewport=layout.viewport,
            tiles=[
                LayoutTile(
                    key=tile.key,
                    src=tile.image.src,
                    public_id=tile.image.public_id,
                    shape=tile.shape,
                    grid_column=tile.grid_column,
                    grid_row=tile.grid_row,
                    sequence_index=tile.sequence_index,
                    slot_index=tile.slot_index,
                )
                for tile in layout.tiles
            ],
            columns=layout.columns,
            rows=layout.rows,
            sequence_count=layout.sequence_count,
            sequence_width=layout.sequence_width,
            image_count=image_count,
            metrics=metrics,
            message="No gallery images found" if layout.is_empty else None,
        )
