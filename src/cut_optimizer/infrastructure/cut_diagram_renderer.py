"""Cut diagram rendering for optimization results.

This module provides SVG and ASCII rendering of sheet layouts showing piece
placements, dimensions, rotation indicators, and reusable offcuts.
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from .evaluator import summarize, utilization, waste_area
from .layout import Layout, OptimizationResult


class CutDiagramRenderer:
    """Renders cut diagrams as SVG or plain text.

    Attributes:
        scale: Pixels per sheet unit for SVG rendering.
        piece_fill: Fill color for placed pieces.
        piece_stroke: Stroke color for piece outlines.
        offcut_fill: Fill color for reusable free rectangles.
        waste_fill: Background fill showing scrap.
        text_color: Color for labels and dimensions.
        show_dimensions: Whether to show piece dimensions in labels.
    """

    def __init__(
        self,
        scale: float = 1.0,
        piece_fill: str = "#ADD8E6",  # Light blue
        piece_stroke: str = "#000000",  # Black
        offcut_fill: str = "#F5F5DC",  # Beige
        waste_fill: str = "#D3D3D3",  # Light gray
        text_color: str = "#000000",  # Black
        show_dimensions: bool = True,
    ) -> None:
        self.scale = scale
        self.piece_fill = piece_fill
        self.piece_stroke = piece_stroke
        self.offcut_fill = offcut_fill
        self.waste_fill = waste_fill
        self.text_color = text_color
        self.show_dimensions = show_dimensions

    def render_svg(self, layout: Layout, total_sheets: int = 1) -> str:
        """Generate an SVG cut diagram for a single sheet.

        The sheet origin is drawn at the bottom-left corner, so y is
        flipped when converting to SVG coordinates.

        Args:
            layout: Sheet layout with placed pieces.
            total_sheets: Total number of sheets (for header display).

        Returns:
            SVG document as a string.
        """
        sheet = layout.sheet_type
        header_height = 30
        width = sheet.width * self.scale
        height = sheet.height * self.scale

        parts: list[str] = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{width:.1f}" height="{height + header_height:.1f}" '
            f'viewBox="0 0 {width:.1f} {height + header_height:.1f}">',
            f'<text x="4" y="20" font-family="sans-serif" font-size="14" '
            f'fill="{self.text_color}">'
            f"Sheet {layout.sheet_id + 1} of {total_sheets} ({escape(sheet.id)}) - "
            f"{utilization(layout) * 100:.1f}% used</text>",
            f'<rect x="0" y="{header_height}" width="{width:.1f}" height="{height:.1f}" '
            f'fill="{self.waste_fill}" stroke="{self.piece_stroke}"/>',
        ]

        for rect in layout.free_rectangles:
            x, y = self._to_svg(rect.x, rect.top_edge, sheet.height, header_height)
            parts.append(
                f'<rect x="{x:.1f}" y="{y:.1f}" '
                f'width="{rect.width * self.scale:.1f}" '
                f'height="{rect.height * self.scale:.1f}" '
                f'fill="{self.offcut_fill}" stroke="none"/>'
            )

        for placement in layout.placements:
            x, y = self._to_svg(placement.x, placement.top_edge, sheet.height, header_height)
            w = placement.width * self.scale
            h = placement.height * self.scale
            parts.append(
                f'<rect x="{x:.1f}" y="{y:.1f}" width="{w:.1f}" height="{h:.1f}" '
                f'fill="{self.piece_fill}" stroke="{self.piece_stroke}"/>'
            )
            label = escape(placement.piece.piece_id)
            if self.show_dimensions:
                label += f" {placement.width:g}x{placement.height:g}"
            if placement.rotated:
                label += " R"
            parts.append(
                f'<text x="{x + w / 2:.1f}" y="{y + h / 2:.1f}" '
                f'font-family="sans-serif" font-size="10" text-anchor="middle" '
                f'dominant-baseline="middle" fill="{self.text_color}">{label}</text>'
            )

        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(self, result: OptimizationResult) -> list[str]:
        """Generate one SVG document per sheet."""
        total = len(result.layouts)
        return [self.render_svg(layout, total) for layout in result.layouts]

    def _to_svg(
        self, x: float, top: float, sheet_height: float, header_height: float
    ) -> tuple[float, float]:
        return x * self.scale, (sheet_height - top) * self.scale + header_height

    def render_ascii(
        self,
        layout: Layout,
        width: int = 80,
        total_sheets: int = 1,
    ) -> str:
        """Generate an ASCII cut diagram for a single sheet.

        Args:
            layout: Sheet layout with placed pieces.
            width: Terminal width in characters (default 80).
            total_sheets: Total number of sheets (for header display).

        Returns:
            ASCII string representation of the layout.
        """
        sheet = layout.sheet_type

        # Reserve 2 chars for borders
        usable_width = width - 2
        scale_x = usable_width / sheet.width

        aspect_ratio = sheet.height / sheet.width
        grid_height = int(usable_width * aspect_ratio * 0.5)  # 0.5 for char aspect ratio
        grid_height = max(grid_height, 10)
        scale_y = grid_height / sheet.height

        grid = [[" " for _ in range(usable_width)] for _ in range(grid_height)]
        for placement in layout.placements:
            self._draw_piece_ascii(
                grid,
                x=placement.x,
                y=placement.y,
                width=placement.width,
                height=placement.height,
                label=placement.piece.piece_id,
                dims=f"{placement.width:g}x{placement.height:g}"
                + ("R" if placement.rotated else ""),
                sheet_height=sheet.height,
                scale_x=scale_x,
                scale_y=scale_y,
            )

        lines: list[str] = [
            f"Sheet {layout.sheet_id + 1} of {total_sheets} - {sheet.id} "
            f"{sheet.width:g}x{sheet.height:g} - "
            f"{(1 - utilization(layout)) * 100:.1f}% waste",
            "+" + "-" * usable_width + "+",
        ]
        for row in grid:
            lines.append("|" + "".join(row) + "|")
        lines.append("+" + "-" * usable_width + "+")
        return "\n".join(lines)

    def _draw_piece_ascii(
        self,
        grid: list[list[str]],
        *,
        x: float,
        y: float,
        width: float,
        height: float,
        label: str,
        dims: str,
        sheet_height: float,
        scale_x: float,
        scale_y: float,
    ) -> None:
        """Draw a single piece onto the ASCII grid (row 0 is the sheet top)."""
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0

        x1 = int(x * scale_x)
        x2 = int((x + width) * scale_x)
        y1 = int((sheet_height - y - height) * scale_y)
        y2 = int((sheet_height - y) * scale_y)

        x1 = max(0, min(x1, grid_width - 1))
        x2 = max(0, min(x2, grid_width - 1))
        y1 = max(0, min(y1, grid_height - 1))
        y2 = max(0, min(y2, grid_height - 1))

        for col in range(x1, x2 + 1):
            grid[y1][col] = "-"
            grid[y2][col] = "-"
        for row in range(y1, y2 + 1):
            grid[row][x1] = "|"
            grid[row][x2] = "|"
        for row, col in ((y1, x1), (y1, x2), (y2, x1), (y2, x2)):
            grid[row][col] = "+"

        # Label and dimensions inside the piece, if space permits
        for offset, text in ((1, label), (2, dims)):
            row = y1 + offset
            if row >= y2:
                break
            text = text[: max(0, x2 - x1 - 1)]
            for i, char in enumerate(text):
                grid[row][x1 + 1 + i] = char

    def render_all_ascii(self, result: OptimizationResult, width: int = 80) -> str:
        """Generate ASCII cut diagrams for all sheets.

        Args:
            result: Complete optimization result.
            width: Terminal width in characters.

        Returns:
            Combined ASCII string with all sheets and a summary line.
        """
        if not result.layouts:
            return "No sheets to display."

        total_sheets = len(result.layouts)
        parts: list[str] = []
        for layout in result.layouts:
            parts.append(self.render_ascii(layout, width, total_sheets))
            parts.append("")

        summary = summarize(result)
        parts.append("=" * width)
        parts.append(
            f"SUMMARY: {total_sheets} sheet{'s' if total_sheets != 1 else ''}, "
            f"{(1 - summary.utilization) * 100:.1f}% total waste"
        )
        if result.unplaced:
            parts.append(f"  {len(result.unplaced)} piece(s) could not be placed")
        return "\n".join(parts)

    def render_waste_summary(self, result: OptimizationResult) -> str:
        """Generate a text summary of sheet usage, waste and cost.

        Args:
            result: Complete optimization result.

        Returns:
            Formatted summary string.
        """
        summary = summarize(result)
        lines: list[str] = [
            "CUT OPTIMIZATION SUMMARY",
            "=" * 40,
            f"Heuristic: {result.heuristic or 'none'}",
            f"Total Sheets: {summary.sheets_used}",
            f"Pieces Placed: {summary.pieces_placed}",
            f"Total Waste Area: {summary.total_waste_area:g}",
            f"Utilization: {summary.utilization * 100:.1f}%",
            f"Total Cost: {summary.total_cost:g}",
            "",
            "Per-Sheet Details:",
        ]

        for layout in result.layouts:
            lines.append(
                f"  Sheet {layout.sheet_id + 1} ({layout.sheet_type.id}): "
                f"{layout.piece_count} piece{'s' if layout.piece_count != 1 else ''}, "
                f"{waste_area(layout):g} waste, "
                f"{utilization(layout) * 100:.1f}% used"
            )

        if result.unplaced:
            lines.append("")
            lines.append(f"Unplaced Pieces: {len(result.unplaced)}")
            for piece in result.unplaced:
                lines.append(f"  {piece.piece_id} ({piece.width:g} x {piece.height:g})")

        if not result.complete:
            lines.append("")
            lines.append(
                f"Budget exhausted: {result.runs_completed} of "
                f"{result.runs_total} heuristic runs completed"
            )

        return "\n".join(lines)
