"""
Visualization
=============
Static figures for a simulated jump:
  1. Jump over the hill profile, with the result panel
  2. Dashboard: speed, acceleration, direction, height over the hill
  3. Comparison of several runs (integration policies, parameter variants)
"""

from typing import Dict, Optional

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec

from .hill import HillProfile, TAKEOFF_POINT
from .integrator import TrajectoryResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'hill_color': '#cfd8dc',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
}

LEGEND_STYLE = dict(facecolor='#1a1a1a', edgecolor='#444', labelcolor=STYLE['text_color'])


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _save(fig, save_path):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])


# ══════════════════════════════════════════════════════════════════════════
#  1. Jump over the hill
# ══════════════════════════════════════════════════════════════════════════

def plot_jump(result: TrajectoryResult, hill: Optional[HillProfile] = None,
              save_path: str = None) -> plt.Figure:
    """Hill profile, centre-of-mass path and the result panel."""
    hill = hill if hill is not None else HillProfile()
    fig = plt.figure(figsize=(16, 7))
    gs = gridspec.GridSpec(1, 4, figure=fig, wspace=0.25)
    ax = fig.add_subplot(gs[0, :3])
    ax_info = fig.add_subplot(gs[0, 3])
    _apply_dark_style(fig, ax)

    hx = np.linspace(hill.start_x, hill.end_x, 2000)
    hy = hill.hill_profile(hx)
    ax.fill_between(hx, 0, hy, color=STYLE['hill_color'], alpha=0.25)
    ax.plot(hx, hy, color=STYLE['hill_color'], linewidth=1.5, label='Hill')

    track = ~result.airborne
    ax.plot(result.x[track], result.y[track], color=STYLE['accent_colors'][1],
            linewidth=2.5, label='In-run')
    ax.plot(result.x[result.airborne], result.y[result.airborne],
            color=STYLE['accent_colors'][0], linewidth=2.5, label='Flight')

    ax.plot(*TAKEOFF_POINT, 'o', color='#00e676', markersize=9,
            label='Takeoff', zorder=5)
    res = result.result
    ax.plot(res.landing_x, res.landing_y, 'x', color='#ff5252',
            markersize=12, markeredgewidth=3, label='Landing', zorder=5)

    ax.set_aspect('equal')
    ax.set_xlim(hill.start_x, hill.end_x)
    ax.set_ylim(bottom=0)
    ax.set_xlabel('x (m)', fontsize=12)
    ax.set_ylabel('Altitude (m)', fontsize=12)
    ax.set_title('Ski Jump Trajectory, Whistler HS140', fontsize=13, fontweight='bold')
    ax.legend(loc='upper right', fontsize=10, **LEGEND_STYLE)

    # ── Result panel ──
    ax_info.set_facecolor('#111111')
    ax_info.axis('off')
    metrics = [
        ('MASS', f'{res.mass:.2f} kg'),
        ('HEIGHT', f'{res.height:.2f} m'),
        ('START', f'{res.start_position:.2f} m'),
        ('TAKEOFF', f'{res.takeoff_speed:.2f} m/s'),
        ('FLIGHT TIME', f'{res.flight_time:.2f} s'),
        ('MAX HEIGHT', f'{result.max_height_above_hill:.2f} m'),
        ('DISTANCE', f'{res.final_distance:.2f} m'),
    ]
    for i, (label, value) in enumerate(metrics):
        y_pos = 0.92 - i * 0.12
        ax_info.text(0.05, y_pos, label, fontsize=10, fontweight='bold',
                     color='#888888', transform=ax_info.transAxes, fontfamily='monospace')
        ax_info.text(0.95, y_pos, value, fontsize=11, fontweight='bold',
                     color='#00d4ff', transform=ax_info.transAxes,
                     ha='right', fontfamily='monospace')
    ax_info.set_title('RESULTS', fontweight='bold', color=STYLE['text_color'],
                      fontsize=13, pad=10)

    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  2. Dashboard
# ══════════════════════════════════════════════════════════════════════════

def plot_dashboard(result: TrajectoryResult, save_path: str = None) -> plt.Figure:
    """Time histories of the recorded quantities."""
    fig, axes = plt.subplots(2, 2, figsize=(16, 10))
    _apply_dark_style(fig, axes)
    t_takeoff = result.time[result.takeoff_index - 1]

    ax = axes[0, 0]
    ax.plot(result.time, result.velocity, color='#ff6b35', linewidth=2)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Speed (m/s)')
    ax.set_title('SPEED', fontweight='bold')

    ax = axes[0, 1]
    ax.plot(result.time, result.ax, label='ax', color='#00d4ff', linewidth=1.5)
    ax.plot(result.time, result.ay, label='ay', color='#ff6b35', linewidth=1.5)
    ax.plot(result.time, result.acceleration, label='|a|', color='#00e676', linewidth=1.5)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Acceleration (m/s²)')
    ax.set_title('ACCELERATION', fontweight='bold')
    ax.legend(fontsize=9, **LEGEND_STYLE)

    ax = axes[1, 0]
    ax.plot(result.time, np.degrees(result.vel_angle), color='#e040fb', linewidth=2)
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Direction (°)')
    ax.set_title('VELOCITY DIRECTION', fontweight='bold')

    ax = axes[1, 1]
    ax.plot(result.time[result.airborne], result.height_above_hill[result.airborne],
            color='#ffeb3b', linewidth=2)
    ax.axhline(y=result.params.landing_clearance, color='#ff5252',
               linestyle='--', alpha=0.6, label='Landing clearance')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Height over hill (m)')
    ax.set_title('FLIGHT HEIGHT', fontweight='bold')
    ax.legend(fontsize=9, **LEGEND_STYLE)

    for ax in axes.flatten()[:3]:
        ax.axvline(x=t_takeoff, color='#555', linestyle='--', alpha=0.5)

    fig.suptitle('SKI JUMP DASHBOARD', fontsize=16, fontweight='bold',
                 color='#00d4ff', y=0.98)
    _save(fig, save_path)
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  3. Run comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_comparison(results: Dict[str, TrajectoryResult],
                    save_path: str = None) -> plt.Figure:
    """Flight paths and height over the hill for several labelled runs."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(16, 6))
    _apply_dark_style(fig, np.array([ax1, ax2]))

    colors = STYLE['accent_colors']
    for (label, res), color in zip(results.items(), colors * 4):
        air = res.airborne
        ax1.plot(res.x[air], res.y[air], color=color, linewidth=2,
                 label=f'{label} ({res.result.final_distance:.1f} m)')
        ax2.plot(res.x[air], res.height_above_hill[air], color=color, linewidth=2)

    ax1.set_xlabel('x (m)')
    ax1.set_ylabel('Altitude (m)')
    ax1.set_title('Flight Path', fontweight='bold')
    ax1.legend(fontsize=9, **LEGEND_STYLE)
    ax2.set_xlabel('x (m)')
    ax2.set_ylabel('Height over hill (m)')
    ax2.set_title('Height Over Hill', fontweight='bold')

    plt.tight_layout()
    _save(fig, save_path)
    return fig
