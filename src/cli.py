"""
Command-line interface for HydroWave.

Usage:
    # When installed via pip:
    $ hydrowave run hydro_inputs.json --hydro hydro_data.json
    $ hydrowave run hydro_inputs.json --hydro hydro_data.json --dump-diagnostics --plot

    # When running as module:
    $ python -m hydrowave run hydro_inputs.json --hydro hydro_data.json

    # Create a workspace with template files:
    $ hydrowave init my_case
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="hydrowave",
        description="HydroWave - wave excitation forces for floating multibody simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Irregular waves with IRF data
  hydrowave run hydro_inputs.json --hydro hydro_data.json

  # Also write spectrum/elevation/IRF text dumps
  hydrowave run hydro_inputs.json --hydro hydro_data.json --dump-diagnostics

  # Quick run without saving (for testing)
  hydrowave run hydro_inputs.json --hydro hydro_data.json --no-save --no-progress
""",
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version="%(prog)s 0.1.0",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run command
    run_parser = subparsers.add_parser(
        "run",
        help="Compute the wave force history for a configuration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    run_parser.add_argument(
        "inputs",
        type=str,
        help="Path to hydro inputs JSON (mode, Hs, Tp, dt, duration, ...)",
    )
    run_parser.add_argument(
        "--hydro", "-H",
        type=str,
        default=None,
        help="Path to hydro data JSON (required for regular/irregular modes)",
    )
    run_parser.add_argument(
        "--case-id", "-c",
        type=int,
        default=1,
        help="Case identifier (default: 1)",
    )
    run_parser.add_argument(
        "--info", "-i",
        type=str,
        default="",
        help="Description/info string for the run",
    )
    run_parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default="results",
        help="Output directory for results (default: results)",
    )
    run_parser.add_argument(
        "--dump-diagnostics", "-d",
        action="store_true",
        help="Write spectrum, elevation and resampled IRF text files",
    )
    run_parser.add_argument(
        "--plot", "-p",
        action="store_true",
        help="Plot the force history after the run",
    )
    run_parser.add_argument(
        "--no-save",
        action="store_true",
        help="Don't save results to files (useful for quick tests)",
    )
    run_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress bar while stepping",
    )

    # Info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about a hydro inputs file",
    )
    info_parser.add_argument(
        "inputs",
        type=str,
        help="Path to hydro inputs JSON",
    )
    info_parser.add_argument(
        "--hydro", "-H",
        type=str,
        default=None,
        help="Path to hydro data JSON",
    )

    # Init command (create workspace template)
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new workspace with template files",
    )
    init_parser.add_argument(
        "directory",
        type=str,
        nargs="?",
        default=".",
        help="Directory to initialize (default: current directory)",
    )
    init_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Overwrite existing files",
    )

    return parser


def cmd_run(args: argparse.Namespace) -> int:
    """Execute the run command."""
    from .Simu import run_wave_forces

    inputs_path = Path(args.inputs)
    if not inputs_path.exists():
        print(f"Error: Inputs file not found: {inputs_path}", file=sys.stderr)
        print(f"  Current directory: {Path.cwd()}", file=sys.stderr)
        return 1

    hydro_path = Path(args.hydro) if args.hydro else None
    if hydro_path is not None and not hydro_path.exists():
        print(f"Error: Hydro data file not found: {hydro_path}", file=sys.stderr)
        return 1

    try:
        results = run_wave_forces(
            inputs=inputs_path,
            hydro_data=hydro_path,
            case_id=args.case_id,
            info_string=args.info,
            results_dir=args.output_dir,
            save_results=not args.no_save,
            show_progress=not args.no_progress,
            dump_diagnostics=args.dump_diagnostics,
            plot_results=args.plot,
        )
    except (ValueError, KeyError, TypeError) as e:
        print(f"Error: Invalid configuration - {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1

    if results.success:
        print(f"\n✓ Wave force run completed successfully!")
        return 0
    print(f"\n✗ Wave force run completed with issues: {results.message}", file=sys.stderr)
    return 1


def cmd_info(args: argparse.Namespace) -> int:
    """Execute the info command - show configuration information."""
    from .params import load_hydro_inputs, load_hydro_data

    inputs_path = Path(args.inputs)
    if not inputs_path.exists():
        print(f"Error: Inputs file not found: {inputs_path}", file=sys.stderr)
        return 1

    try:
        inputs = load_hydro_inputs(inputs_path)
    except (ValueError, json.JSONDecodeError) as e:
        print(f"Error reading inputs: {e}", file=sys.stderr)
        return 1

    print("\n" + "=" * 60)
    print(" " * 15 + "HYDRO INPUTS INFORMATION")
    print("=" * 60)
    print(f"\n  Inputs: {inputs_path}")
    print(f"\n  Simulation:")
    print(f"    Bodies: {inputs.num_bodies}")
    print(f"    dt: {inputs.simulation_dt}s")
    print(f"    Duration: {inputs.simulation_duration}s")
    print(f"\n  Waves:")
    print(f"    Mode: {inputs.mode}")
    if inputs.mode == "regular":
        print(f"    Amplitude: {inputs.regular_wave_amplitude}m")
        print(f"    Omega: {inputs.regular_wave_omega} rad/s")
    elif inputs.mode == "irregular":
        print(f"    Hs: {inputs.wave_height}m, Tp: {inputs.wave_period}s")
        print(f"    Spectrum: {inputs.num_frequencies} frequencies in "
              f"[{inputs.spectrum_start}, {inputs.spectrum_end}] Hz")
        print(f"    Seed: {inputs.seed}, ramp: {inputs.ramp_duration}s")

    if args.hydro:
        try:
            hydro = load_hydro_data(args.hydro)
        except (OSError, ValueError, json.JSONDecodeError) as e:
            print(f"Error reading hydro data: {e}", file=sys.stderr)
            return 1
        print(f"\n  Hydro data: {args.hydro}")
        for b, info in enumerate(hydro.regular or []):
            print(f"    Body {b} regular: {len(info.freq_list)} frequencies, "
                  f"{info.excitation_mag_matrix.shape[1]} directions")
        for b, info in enumerate(hydro.irregular or []):
            t = info.excitation_irf_time
            print(f"    Body {b} IRF: {len(t)} samples over [{t[0]:.3f}, {t[-1]:.3f}] s")
        status = "✓" if hydro.num_bodies == inputs.num_bodies else "✗ (body count mismatch)"
        print(f"    Bodies: {hydro.num_bodies} {status}")

    print("\n" + "=" * 60)
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Execute the init command - create workspace template."""
    import numpy as np

    directory = Path(args.directory)
    directory.mkdir(parents=True, exist_ok=True)

    print(f"\nInitializing workspace in: {directory.absolute()}")

    inputs_template = {
        "num_bodies": 1,
        "simulation_dt": 0.05,
        "simulation_duration": 60.0,
        "mode": "irregular",
        "wave_height": 2.0,
        "wave_period": 8.0,
        "seed": 1,
        "regular_wave_amplitude": 1.0,
        "regular_wave_omega": 0.8,
        "spectrum_start": 0.001,
        "spectrum_end": 1.0,
        "num_frequencies": 1000,
        "ramp_duration": 0.0,
    }

    # Placeholder hydro data: damped-oscillation IRF and a flat RAO table
    irf_time = np.linspace(0.0, 10.0, 201)
    irf = np.exp(-0.5 * irf_time) * np.cos(2.0 * irf_time)
    omega = np.linspace(0.1, 3.0, 30)
    hydro_template = {
        "bodies": [
            {
                "regular": {
                    "freq_list": omega.tolist(),
                    "excitation_mag_matrix": [[np.full(len(omega), 1.0e4).tolist()]] * 6,
                    "excitation_phase_matrix": [[np.zeros(len(omega)).tolist()]] * 6,
                },
                "irregular": {
                    "excitation_irf_time": irf_time.tolist(),
                    "excitation_irf_matrix": [[(1.0e4 * irf).tolist()]] * 6,
                },
            }
        ]
    }

    files_to_create = [
        ("hydro_inputs.json", inputs_template),
        ("hydro_data.json", hydro_template),
    ]

    for filename, content in files_to_create:
        file_path = directory / filename
        if file_path.exists() and not args.force:
            print(f"  Skipping {filename} (exists, use --force to overwrite)")
        else:
            with open(file_path, "w") as f:
                json.dump(content, f, indent=2)
            print(f"  Created {filename}")

    print(f"\n✓ Workspace initialized!")
    print(f"\nNext steps:")
    print(f"  1. Replace hydro_data.json with your body's excitation data")
    print(f"  2. Modify hydro_inputs.json as needed")
    print(f"  3. Run: hydrowave run {directory}/hydro_inputs.json --hydro {directory}/hydro_data.json")

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "info":
        return cmd_info(args)
    elif args.command == "init":
        return cmd_init(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
