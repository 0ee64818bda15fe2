from jointcad.config import default_config
from jointcad.assembly import SUB_ASSEMBLIES, complete_joint_assembly, stack_span
from jointcad import geometry

def check_geometry():
    cfg = default_config()
    for name, build in SUB_ASSEMBLIES.items():
        print(f"Building {name}...")
        part = build(cfg)
        print(f"  volume={geometry.volume(part):.1f} mm^3, "
              f"extent x={geometry.extent(part, 'x'):.2f} z={geometry.extent(part, 'z'):.2f}")

    print("Building complete assembly...")
    joint = complete_joint_assembly(cfg)
    lo, hi = geometry.bounds(joint)
    print(f"Z range: {lo[2]:.3f} .. {hi[2]:.3f}")
    print(f"Stack span (centre to centre): {stack_span(cfg):.3f}")

    expected_top = cfg.shaft_length + cfg.cover_thickness
    if abs(hi[2] - expected_top) > 1e-3:
        print(f"FAIL: Expected top at {expected_top:.3f}")
    else:
        print("PASS: Cover top where expected.")

if __name__ == "__main__":
    check_geometry()
