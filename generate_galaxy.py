#!/usr/bin/env python3
"""Generate a galaxy from the command line and optionally plot it."""

import json
import sys

from py_galaxy.config import settings
from py_galaxy.config.presets import DEFAULT_PRESET, default_galaxy_config, list_presets
from py_galaxy.core.galaxy_generator import generate_galaxy
from py_galaxy.core.models import ConnectivityOptions, SystemTier
from py_galaxy.utils.logging_setup import configure_logging

TIER_COLORS = {
    SystemTier.ORIGIN: "gold",
    SystemTier.CORE: "deepskyblue",
    SystemTier.RIM: "lightgray",
}


def plot_galaxy(galaxy, filename):
    """Render systems, lanes and anomalies to a PNG."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.patches import Circle

    fig, ax = plt.subplots(figsize=(12, 12))
    ax.set_facecolor("black")

    radius = galaxy.bounds.radius
    ax.add_patch(Circle((0, 0), radius, fill=False, color="dimgray", linestyle="--"))

    positions = {s.id: (s.x, s.y) for s in galaxy.systems}
    for lane in galaxy.warp_lanes:
        x1, y1 = positions[lane.from_id]
        x2, y2 = positions[lane.to_id]
        ax.plot([x1, x2], [y1, y2], color="steelblue", linewidth=0.5, alpha=0.6)

    for tier, color in TIER_COLORS.items():
        members = [s for s in galaxy.systems if s.tier == tier]
        if members:
            ax.scatter(
                [s.x for s in members],
                [s.y for s in members],
                s=40 if tier == SystemTier.ORIGIN else 8,
                c=color,
                label=f"{tier.value} ({len(members)})",
                zorder=3,
            )

    if galaxy.anomalies:
        ax.scatter(
            [a.x for a in galaxy.anomalies],
            [a.y for a in galaxy.anomalies],
            s=12,
            c="magenta",
            marker="x",
            label=f"anomalies ({len(galaxy.anomalies)})",
            zorder=2,
        )

    ax.set_xlim(galaxy.bounds.min_x, galaxy.bounds.max_x)
    ax.set_ylim(galaxy.bounds.min_y, galaxy.bounds.max_y)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(
        f"Seed {galaxy.config.seed}: {len(galaxy.systems)} systems, "
        f"{len(galaxy.warp_lanes)} warp lanes"
    )
    ax.legend(loc="upper right", fontsize=9)

    plt.tight_layout()
    plt.savefig(filename, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Galaxy plot saved as: {filename}")


def main():
    """Main function."""
    import argparse

    parser = argparse.ArgumentParser(description="Generate a procedural galaxy")
    parser.add_argument("--seed", type=int, default=settings.default_seed, help="Random seed")
    parser.add_argument("--radius", type=float, default=settings.default_radius, help="Galaxy radius in light years")
    parser.add_argument("--systems", type=int, default=settings.default_system_count, help="Target number of star systems")
    parser.add_argument("--anomalies", type=int, default=settings.default_anomaly_count, help="Target number of anomalies")
    parser.add_argument("--preset", default=DEFAULT_PRESET, choices=list_presets(), help="Fixed-system preset")
    parser.add_argument("--classic", action="store_true", help="Use classic probabilistic warp lanes")
    parser.add_argument("--output", help="Write the galaxy as JSON to this file")
    parser.add_argument("--plot", help="Write a PNG rendering to this file (needs matplotlib)")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    args = parser.parse_args()
    configure_logging(args.log_level, "plain")

    try:
        config = default_galaxy_config(
            args.preset,
            seed=args.seed,
            radius=args.radius,
            star_system_count=args.systems,
            anomaly_count=args.anomalies,
            connectivity=ConnectivityOptions(use_tiered_voronoi_mode=not args.classic),
        )
        galaxy = generate_galaxy(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    stats = galaxy.statistics
    print("=" * 60)
    print(f"Seed:        {config.seed}")
    print(f"Radius:      {config.radius} LY")
    print(f"Systems:     {stats.system_count} / {stats.requested_system_count} requested")
    print(f"Anomalies:   {stats.anomaly_count} / {stats.requested_anomaly_count} requested")
    print(f"Warp lanes:  {stats.lane_count} {stats.lanes_by_phase}")
    print(f"Avg degree:  {stats.average_connections:.2f}")
    print(f"Max lane:    {stats.max_lane_distance:.1f} LY")
    print(f"Components:  {stats.component_count}")
    print("=" * 60)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(galaxy.model_dump(mode="json", by_alias=True), f, indent=2, ensure_ascii=False)
        print(f"Galaxy written to: {args.output}")

    if args.plot:
        plot_galaxy(galaxy, args.plot)

    return 0


if __name__ == "__main__":
    sys.exit(main())
