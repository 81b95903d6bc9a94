"""
Box selection for quoting.

Single-box quoting: the largest bottle in the cart decides the box, and each
extra bottle adds a conservative weight bump for liquid and padding.
Weights are shipping-ready estimates including insulation and a cold pack.
"""

from dataclasses import dataclass
from typing import Iterable, List

from reefcultures.core.enums import PackagePreset
from reefcultures.schemas.shipping import CartItem, PackedPackage


@dataclass(frozen=True)
class BoxPreset:
    preset: PackagePreset
    weight_oz: float
    length_in: float
    width_in: float
    height_in: float
    extra_per_bottle_oz: float


PRESETS = {
    PackagePreset.BOX_16OZ: BoxPreset(PackagePreset.BOX_16OZ, 40, 10, 8, 6, 10),   # 2.5 lb
    PackagePreset.BOX_32OZ: BoxPreset(PackagePreset.BOX_32OZ, 64, 10, 8, 6, 10),   # 4.0 lb
    PackagePreset.BOX_64OZ: BoxPreset(PackagePreset.BOX_64OZ, 96, 12, 10, 8, 16),  # 6.0 lb
    PackagePreset.BOX_1GAL: BoxPreset(PackagePreset.BOX_1GAL, 192, 12, 12, 10, 24),  # 12.0 lb
}


def choose_preset(items: Iterable[CartItem]) -> BoxPreset:
    skus: List[str] = [str(item.sku or "").upper() for item in items]

    if any("1GAL" in sku or "GALLON" in sku for sku in skus):
        return PRESETS[PackagePreset.BOX_1GAL]
    if any("64" in sku for sku in skus):
        return PRESETS[PackagePreset.BOX_64OZ]
    if any("32" in sku for sku in skus):
        return PRESETS[PackagePreset.BOX_32OZ]
    return PRESETS[PackagePreset.BOX_16OZ]


def build_package(items: List[CartItem]) -> PackedPackage:
    """Pick a box for the cart and estimate its shipping weight."""
    box = choose_preset(items)
    total_qty = sum(item.qty for item in items)
    weight_oz = box.weight_oz + max(0, total_qty - 1) * box.extra_per_bottle_oz

    return PackedPackage(
        preset=box.preset.value,
        weight_oz=weight_oz,
        length_in=box.length_in,
        width_in=box.width_in,
        height_in=box.height_in,
    )
