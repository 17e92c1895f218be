"""Static preset catalogues: filament/resin materials and printer models."""
from __future__ import annotations

from typing import NamedTuple


class MaterialPreset(NamedTuple):
    name: str
    cost_per_kg: float


class PrinterPreset(NamedTuple):
    id: str
    name: str
    market_price: float
    power_watts: float


# Seeded into an owner's catalogue when it is empty
DEFAULT_MATERIALS: tuple[MaterialPreset, ...] = (
    MaterialPreset("PLA (Polylactic Acid)", 85.90),
    MaterialPreset("PLA+ (Reinforced PLA)", 95.00),
    MaterialPreset("PLA Silk", 110.00),
    MaterialPreset("PLA Matte", 105.00),
    MaterialPreset("PLA Marble", 115.00),
    MaterialPreset("PLA Glow in the Dark", 120.00),
    MaterialPreset("PLA Dual Color", 130.00),
    MaterialPreset("PLA Metal Fill", 180.00),
    MaterialPreset("PLA Wood Fill", 160.00),
    MaterialPreset("PLA CF (Carbon Fiber)", 200.00),
    MaterialPreset("PLA High Speed", 110.00),
    MaterialPreset("PLA Recycled", 75.00),
    MaterialPreset("PETG (Polyethylene Terephthalate Glycol)", 95.50),
    MaterialPreset("PETG-CF (Carbon Fiber PETG)", 250.00),
    MaterialPreset("PETG-GF (Glass Fiber PETG)", 220.00),
    MaterialPreset("PETG Translucent", 100.00),
    MaterialPreset("ABS (Acrylonitrile Butadiene Styrene)", 75.00),
    MaterialPreset("ABS+ (Reinforced ABS)", 85.00),
    MaterialPreset("ABS-GF (Glass Fiber ABS)", 200.00),
    MaterialPreset("ABS-CF (Carbon Fiber ABS)", 280.00),
    MaterialPreset("ASA (Acrylonitrile Styrene Acrylate)", 120.00),
    MaterialPreset("TPU 95A (Flexible)", 150.00),
    MaterialPreset("TPU 85A (Extra Flexible)", 170.00),
    MaterialPreset("TPU 64D (Semi-Rigid)", 160.00),
    MaterialPreset("TPE (Thermoplastic Elastomer)", 180.00),
    MaterialPreset("TPC (Flexible Copolyester)", 190.00),
    MaterialPreset("Nylon PA6", 220.00),
    MaterialPreset("Nylon PA12", 280.00),
    MaterialPreset("Nylon PA6-CF", 380.00),
    MaterialPreset("Nylon PA6-GF", 300.00),
    MaterialPreset("Nylon PA12-CF", 420.00),
    MaterialPreset("PC (Polycarbonate)", 250.00),
    MaterialPreset("PC-ABS", 230.00),
    MaterialPreset("PC-CF (Carbon Fiber Polycarbonate)", 350.00),
    MaterialPreset("POM (Acetal / Delrin)", 280.00),
    MaterialPreset("PP (Polypropylene)", 200.00),
    MaterialPreset("PP-GF (Glass Fiber Polypropylene)", 260.00),
    MaterialPreset("HIPS (High Impact Polystyrene)", 90.00),
    MaterialPreset("PVA (Soluble Support)", 350.00),
    MaterialPreset("PVB (Polyvinyl Butyral)", 320.00),
    MaterialPreset("PVDF (Polyvinylidene Fluoride)", 500.00),
    MaterialPreset("PEI / ULTEM", 800.00),
    MaterialPreset("PEEK", 2500.00),
    MaterialPreset("PEKK", 2200.00),
    MaterialPreset("PPS (Polyphenylene Sulfide)", 1500.00),
    MaterialPreset("PSU (Polysulfone)", 900.00),
    MaterialPreset("PA-CF (Carbon Fiber Polyamide)", 400.00),
    MaterialPreset("Carbon Fiber Blend (Generic)", 350.00),
    MaterialPreset("Glass Fiber Blend (Generic)", 250.00),
    MaterialPreset("Metal Fill - Stainless Steel", 450.00),
    MaterialPreset("Metal Fill - Bronze", 420.00),
    MaterialPreset("Metal Fill - Copper", 430.00),
    MaterialPreset("Metal Fill - Aluminium", 400.00),
    MaterialPreset("Ceramic Fill", 500.00),
    MaterialPreset("Resin Standard (UV 405nm)", 140.00),
    MaterialPreset("Resin Water Washable", 160.00),
    MaterialPreset("Resin Tough", 280.00),
    MaterialPreset("Resin Flexible", 320.00),
    MaterialPreset("Resin Castable", 450.00),
    MaterialPreset("Resin ABS-Like", 200.00),
    MaterialPreset("Resin Dental (Biocompatible)", 600.00),
    MaterialPreset("Resin Clear", 180.00),
    MaterialPreset("Resin Ceramic", 400.00),
    MaterialPreset("Resin High Temp", 350.00),
    MaterialPreset("Resin Engineering", 300.00),
    MaterialPreset("Resin Nylon-Like", 250.00),
    MaterialPreset("Resin PP-Like", 260.00),
    MaterialPreset("Resin Rubber-Like", 350.00),
    MaterialPreset("Resin Plant-Based", 190.00),
    MaterialPreset("Resin 8K (Ultra Detail)", 220.00),
    MaterialPreset("Resin Pigmented", 170.00),
)

PRINTER_PRESETS: tuple[PrinterPreset, ...] = (
    PrinterPreset("b1", "Bambu Lab A1 Mini", 2000, 150),
    PrinterPreset("b2", "Bambu Lab A1", 3500, 200),
    PrinterPreset("b3", "Bambu Lab P1P", 5500, 250),
    PrinterPreset("b4", "Bambu Lab P1S", 6500, 300),
    PrinterPreset("b5", "Bambu Lab X1 Carbon", 12000, 350),
    PrinterPreset("b6", "Bambu Lab X1E", 18000, 350),
    PrinterPreset("b7", "Bambu Lab H2S", 8500, 300),
    PrinterPreset("b8", "Bambu Lab H2D", 9500, 300),
    PrinterPreset("c1", "Creality Ender 3", 1000, 150),
    PrinterPreset("c2", "Creality Ender 3 V2", 1200, 150),
    PrinterPreset("c3", "Creality Ender 3 V3 SE", 1800, 250),
    PrinterPreset("c4", "Creality Ender 3 V3 KE", 2800, 350),
    PrinterPreset("c5", "Creality K1", 4500, 350),
    PrinterPreset("c6", "Creality K1 Max", 6500, 350),
    PrinterPreset("c7", "Creality K1C", 5500, 350),
    PrinterPreset("c8", "Creality CR-10 SE", 3500, 350),
    PrinterPreset("c9", "Creality HALOT-MAGE", 2500, 150),
    PrinterPreset("s1", "Snapmaker Artisan", 20000, 300),
    PrinterPreset("s2", "Snapmaker J1s", 10000, 300),
    PrinterPreset("s3", "Snapmaker A350T", 12000, 300),
    PrinterPreset("s4", "Snapmaker U1", 15000, 300),
    PrinterPreset("e1", "Elegoo Neptune 3 Pro", 1800, 200),
    PrinterPreset("e2", "Elegoo Neptune 4", 2200, 200),
    PrinterPreset("e3", "Elegoo Neptune 4 Pro", 2500, 200),
    PrinterPreset("e4", "Elegoo Neptune 4 Plus", 3200, 300),
    PrinterPreset("e5", "Elegoo Neptune 4 Max", 4200, 300),
    PrinterPreset("e6", "Elegoo Saturn 3", 3500, 150),
)
