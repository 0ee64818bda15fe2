"""
Visualization module for the joint stacking layout.

Draws a side section (X/Z) of the sub-assembly envelopes at their stack
offsets, with the centre-to-centre span dimensioned, using matplotlib.
"""

from pathlib import Path
from typing import Dict, Tuple
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.patches as patches

from .assembly import gear_center_distance, stack_layout, stack_span
from .config import JointConfig
from .gear_profile import GearDimensions

COLORS = {
    'base_plate': 'tab:blue',
    'lower_housing': 'tab:orange',
    'drive_train': 'tab:green',
    'upper_housing': 'tab:orange',
    'cover_plate': 'tab:purple',
}


def envelopes(cfg: JointConfig) -> Dict[str, Tuple[float, float]]:
    """(width, height) of each sub-assembly's bounding cylinder."""
    flange_diameter = cfg.housing_outer_diameter + 2 * cfg.housing_wall_thickness
    return {
        'base_plate': (cfg.base_diameter, cfg.base_thickness),
        'lower_housing': (flange_diameter, cfg.housing_height),
        'drive_train': (cfg.shaft_diameter, cfg.shaft_length),
        'upper_housing': (flange_diameter, cfg.housing_height),
        'cover_plate': (cfg.base_diameter, cfg.cover_thickness),
    }


def plot_stack_layout(cfg: JointConfig, output_path: Path) -> Path:
    """
    Generate and save the stacking diagram.

    Args:
        cfg: Joint configuration to draw
        output_path: Path to save the image

    Returns:
        The written image path
    """
    output_path = Path(output_path)
    layout = stack_layout(cfg)
    sizes = envelopes(cfg)

    fig, ax = plt.subplots(figsize=(8, 10))

    for name, z in layout.items():
        width, height = sizes[name]
        rect = patches.Rectangle(
            (-width / 2, z - height / 2), width, height,
            linewidth=1.5, edgecolor=COLORS[name], facecolor=COLORS[name], alpha=0.3,
        )
        ax.add_patch(rect)
        ax.plot([-width / 2, width / 2], [z, z], 'k:', linewidth=0.5)
        ax.text(cfg.base_diameter / 2 + 2, z, f"{name} z={z:.1f}",
                ha='left', va='center', fontsize=9)

    # Gears sit a quarter shaft length above the drive train centre
    gear_z = layout.drive_train + cfg.shaft_length / 4
    for teeth, x in ((cfg.input_teeth, 0.0), (cfg.output_teeth, gear_center_distance(cfg))):
        outer = GearDimensions(teeth, cfg.gear_module, cfg.gear_pressure_angle).outer_radius
        ax.add_patch(patches.Rectangle(
            (x - outer, gear_z - cfg.gear_thickness / 2), 2 * outer, cfg.gear_thickness,
            linewidth=1.0, edgecolor='tab:green', facecolor='none', linestyle='--',
        ))

    # Centre-to-centre span
    dim_x = -cfg.base_diameter / 2 - 5
    prop = dict(arrowstyle='<->', shrinkA=0, shrinkB=0, linewidth=1.0, color='black')
    ax.annotate('', xy=(dim_x, layout.base_plate), xytext=(dim_x, layout.cover_plate), arrowprops=prop)
    ax.text(dim_x - 2, (layout.base_plate + layout.cover_plate) / 2, f"span={stack_span(cfg):.2f}",
            ha='right', va='center', fontsize=9, color='darkblue', rotation=90)

    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.set_title(f"Joint stack: {cfg.material.name}, ratio {cfg.gear_ratio:.2f}:1")
    ax.axis('off')

    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
