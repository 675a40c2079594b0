"""
Built-in price list used when the price tab cannot be read.
Stale pricing is preferred over blocking the clerk, so this list must stay
roughly in line with the sheet. Columns: name, unit price, pack type, pack size.
"""
from typing import List

from orders.models import SKU

FALLBACK_PRICE_ROWS = [
    ("COKE 35CL PET", 4400, "PACK", "12 x 35CL"),
    ("COKE 50CL PET", 5800, "PACK", "12 x 50CL"),
    ("COKE 1L PET", 6300, "PACK", "12 x 1L"),
    ("COKE 35CL RGB", 3600, "CRATE", "24 x 35CL"),
    ("COKE ZERO 50CL PET", 5800, "PACK", "12 x 50CL"),
    ("FANTA ORANGE 35CL PET", 4400, "PACK", "12 x 35CL"),
    ("FANTA ORANGE 50CL PET", 5800, "PACK", "12 x 50CL"),
    ("FANTA PINEAPPLE 50CL PET", 5800, "PACK", "12 x 50CL"),
    ("FANTA 35CL RGB", 3600, "CRATE", "24 x 35CL"),
    ("SPRITE 35CL PET", 4400, "PACK", "12 x 35CL"),
    ("SPRITE 50CL PET", 5800, "PACK", "12 x 50CL"),
    ("SPRITE 35CL RGB", 3600, "CRATE", "24 x 35CL"),
    ("SCHWEPPES TONIC 33CL CAN", 7200, "PACK", "24 x 33CL"),
    ("SCHWEPPES BITTER LEMON 33CL CAN", 7200, "PACK", "24 x 33CL"),
    ("SCHWEPPES CHAPMAN 33CL CAN", 7200, "PACK", "24 x 33CL"),
    ("FIVE ALIVE PULPY ORANGE 1L", 9600, "PACK", "12 x 1L"),
    ("FIVE ALIVE BERRY BLAST 1L", 9600, "PACK", "12 x 1L"),
    ("FIVE ALIVE PULPY ORANGE 35CL", 5400, "PACK", "12 x 35CL"),
    ("EVA WATER 75CL", 2600, "PACK", "12 x 75CL"),
    ("EVA WATER 1.5L", 2900, "PACK", "6 x 1.5L"),
    ("EVA WATER 50CL", 2300, "PACK", "12 x 50CL"),
    ("PEPSI 35CL PET", 4300, "PACK", "12 x 35CL"),
    ("PEPSI 50CL PET", 5600, "PACK", "12 x 50CL"),
    ("PEPSI 33CL CAN", 7000, "PACK", "24 x 33CL"),
    ("7UP 35CL PET", 4300, "PACK", "12 x 35CL"),
    ("7UP 50CL PET", 5600, "PACK", "12 x 50CL"),
    ("MIRINDA ORANGE 50CL PET", 5600, "PACK", "12 x 50CL"),
    ("MOUNTAIN DEW 50CL PET", 5600, "PACK", "12 x 50CL"),
    ("AQUAFINA WATER 75CL", 2500, "PACK", "12 x 75CL"),
    ("LIPTON ICE TEA 35CL", 5000, "PACK", "12 x 35CL"),
    ("MALTA GUINNESS 33CL CAN", 9800, "PACK", "24 x 33CL"),
    ("MALTA GUINNESS 33CL RGB", 7800, "CRATE", "24 x 33CL"),
    ("AMSTEL MALTA 33CL CAN", 9900, "PACK", "24 x 33CL"),
    ("AMSTEL MALTA 33CL RGB", 7900, "CRATE", "24 x 33CL"),
    ("MALTINA 33CL CAN", 9600, "PACK", "24 x 33CL"),
    ("MALTINA 33CL RGB", 7600, "CRATE", "24 x 33CL"),
    ("HI MALT 33CL RGB", 7400, "CRATE", "24 x 33CL"),
    ("GUINNESS FES 60CL RGB", 14500, "CRATE", "12 x 60CL"),
    ("GUINNESS SMOOTH 33CL CAN", 13200, "PACK", "24 x 33CL"),
    ("STAR LAGER 60CL RGB", 9400, "CRATE", "12 x 60CL"),
    ("STAR LAGER 33CL CAN", 11800, "PACK", "24 x 33CL"),
    ("GULDER 60CL RGB", 9800, "CRATE", "12 x 60CL"),
    ("HEINEKEN 60CL RGB", 12800, "CRATE", "12 x 60CL"),
    ("HEINEKEN 33CL CAN", 15600, "PACK", "24 x 33CL"),
    ("LEGEND STOUT 60CL RGB", 9600, "CRATE", "12 x 60CL"),
    ("TROPHY LAGER 60CL RGB", 8600, "CRATE", "12 x 60CL"),
    ("HERO LAGER 60CL RGB", 8600, "CRATE", "12 x 60CL"),
    ("BUDWEISER 33CL CAN", 14400, "PACK", "24 x 33CL"),
    ("GOLDBERG 60CL RGB", 9000, "CRATE", "12 x 60CL"),
    ("TIGER 33CL CAN", 12600, "PACK", "24 x 33CL"),
    ("DESPERADOS 33CL CAN", 15000, "PACK", "24 x 33CL"),
]


def fallback_catalog() -> List[SKU]:
    """Fresh SKU objects for the built-in price list."""
    return [
        SKU(id=f"sku-{index}", name=name, unit_price=price, pack_type=pack, pack_type_2=pack_size)
        for index, (name, price, pack, pack_size) in enumerate(FALLBACK_PRICE_ROWS)
    ]
