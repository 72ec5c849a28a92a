"""
Plotting utilities for AIMS.

Body positions in the ecliptic plane, interceptor paths in 3-D, and the
propellant history of an estimated trajectory. Figures are written to disk
with the non-interactive Agg backend.
"""

import os

import numpy as np
import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for saving
import matplotlib.pyplot as plt


# ---------------------------------------------------------------------------
# PlotStyle -- shared styling helpers
# ---------------------------------------------------------------------------

class PlotStyle:
    """Centralised styling and figure management for AIMS plots."""

    COLORS = {
        'sun': '#F5B301',
        'interceptor': '#C73E1D',
        'fuel': '#2E7D32',
        'atlas': '#7B1FA2',
        'neutral': '#546E7A',
    }

    BODY_COLORS = {
        'Mercury': '#8C7853',
        'Venus': '#FFC649',
        'Earth': '#6B93D6',
        'Mars': '#CD5C5C',
        'Jupiter': '#D8CA9D',
        '3I/ATLAS': '#7B1FA2',
    }

    @staticmethod
    def setup_style():
        """Set matplotlib rcParams shared by every AIMS figure."""
        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.size': 11,
            'axes.labelsize': 12,
            'axes.titlesize': 14,
            'axes.titleweight': 'bold',
            'legend.fontsize': 9,
            'figure.figsize': (10, 6),
            'figure.dpi': 100,
            'savefig.dpi': 150,
            'axes.grid': True,
            'grid.color': '#E0E0E0',
            'grid.alpha': 0.7,
            'axes.spines.top': False,
            'axes.spines.right': False,
            'lines.linewidth': 2.0,
        })

    @staticmethod
    def save_figure(fig, filepath, dpi=150):
        """Save *fig* to *filepath*, creating directories as needed."""
        directory = os.path.dirname(filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(filepath, dpi=dpi, bbox_inches='tight',
                    facecolor='white', edgecolor='none')
        plt.close(fig)
        return filepath

    @classmethod
    def body_color(cls, name):
        return cls.BODY_COLORS.get(name, cls.COLORS['neutral'])


# ---------------------------------------------------------------------------
# Standalone plotting functions
# ---------------------------------------------------------------------------

def plot_body_positions(positions, filepath, title='Heliocentric positions'):
    """Ecliptic-plane (X-Y) scatter of body positions.

    Parameters
    ----------
    positions : dict
        ``name -> (x, y, z)`` in AU.
    filepath : str
    title : str
    """
    PlotStyle.setup_style()
    fig, ax = plt.subplots(figsize=(8, 8))

    ax.scatter([0.0], [0.0], s=200, color=PlotStyle.COLORS['sun'], label='Sun', zorder=3)
    for name, pos in positions.items():
        ax.scatter(pos[0], pos[1], s=50, color=PlotStyle.body_color(name), label=name, zorder=3)
        ax.annotate(name, (pos[0], pos[1]), textcoords='offset points', xytext=(6, 6),
                    fontsize=9)

    ax.set_aspect('equal', adjustable='datalim')
    ax.set_xlabel('X [AU]')
    ax.set_ylabel('Y [AU]')
    ax.set_title(title)
    ax.legend(loc='upper right')
    return PlotStyle.save_figure(fig, filepath)


def plot_intercept_trajectory(trajectory, positions, filepath,
                              title='Interceptor trajectory'):
    """3-D plot of an interceptor path with the bodies at launch.

    Parameters
    ----------
    trajectory : InterceptorTrajectory
    positions : dict
        ``name -> (x, y, z)`` in AU, drawn as markers.
    filepath : str
    title : str
    """
    PlotStyle.setup_style()
    fig = plt.figure(figsize=(11, 9))
    ax = fig.add_subplot(111, projection='3d')

    ax.scatter(0.0, 0.0, 0.0, s=150, color=PlotStyle.COLORS['sun'], label='Sun')
    for name, pos in positions.items():
        ax.scatter(*pos, s=40, color=PlotStyle.body_color(name), label=name)

    path = trajectory.positions()
    ax.plot(path[:, 0], path[:, 1], path[:, 2],
            color=PlotStyle.COLORS['interceptor'], label='Interceptor')
    ax.scatter(*path[0], marker='^', s=60, color=PlotStyle.COLORS['interceptor'])
    ax.scatter(*path[-1], marker='x', s=80, color=PlotStyle.COLORS['interceptor'])

    ax.set_xlabel('X [AU]')
    ax.set_ylabel('Y [AU]')
    ax.set_zlabel('Z [AU]')
    ax.set_title(
        f"{title}\n"
        f"dV = {trajectory.total_delta_v / 1000.0:.2f} km/s, "
        f"P(intercept) = {trajectory.intercept_probability:.2f}"
    )
    ax.legend(loc='upper left', fontsize=8)
    return PlotStyle.save_figure(fig, filepath)


def plot_fuel_history(trajectory, filepath, title='Propellant remaining'):
    """Propellant mass vs. days since launch.

    Parameters
    ----------
    trajectory : InterceptorTrajectory
    filepath : str
    title : str
    """
    PlotStyle.setup_style()
    t0 = trajectory.points[0].time
    days = np.array([(p.time - t0) / 86_400_000.0 for p in trajectory.points])
    fuel = np.array([p.fuel_mass for p in trajectory.points])

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(days, fuel, color=PlotStyle.COLORS['fuel'])
    ax.fill_between(days, fuel, alpha=0.15, color=PlotStyle.COLORS['fuel'])
    ax.set_xlabel('Time since launch [days]')
    ax.set_ylabel('Propellant [kg]')
    ax.set_title(title)
    return PlotStyle.save_figure(fig, filepath)
