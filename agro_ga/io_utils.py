"""
I/O utilities for plant layouts.

Handles CSV serialization of a layout and the YAML metadata sidecar written
next to it.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .data_models import EvolutionResult, Individual, PlantType, Point
from .domains import Domain

CSV_COLUMNS = ['index', 'x', 'y', 'radius', 'plant_type', 'variety_id', 'variety_name']


def save_individual_to_csv(
    individual: Individual,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save an Individual to a CSV file, one row per gene in genome order.

    Args:
        individual: Individual to save
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Output file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)

        for idx, point in enumerate(individual):
            writer.writerow([
                idx,
                repr(float(point.x)),
                repr(float(point.y)),
                repr(float(point.radius)),
                point.plant_type.name,
                point.variety_id,
                point.variety_name
            ])

    return output_path


def load_csv_to_individual(csv_path: Union[str, Path]) -> Individual:
    """
    Load a layout CSV file into an unevaluated Individual.

    CSV format:
        index,x,y,radius,plant_type,variety_id,variety_name
        0,1.25,-0.5,0.3,TOMATO,1,Roma
        ...

    Args:
        csv_path: Path to CSV file

    Returns:
        Individual with genes in file order

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValueError: If CSV format is invalid
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    genes = []
    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        if reader.fieldnames is None or not all(col in reader.fieldnames for col in ['x', 'y', 'radius']):
            raise ValueError(
                f"Invalid CSV format in {csv_path}. Expected columns: {','.join(CSV_COLUMNS)}"
            )

        for line_no, row in enumerate(reader, start=2):
            try:
                genes.append(Point(
                    x=float(row['x']),
                    y=float(row['y']),
                    radius=float(row['radius']),
                    plant_type=PlantType.from_name(row.get('plant_type') or 'GENERIC'),
                    variety_id=int(row.get('variety_id') or 0),
                    variety_name=row.get('variety_name') or ''
                ))
            except (TypeError, ValueError) as e:
                raise ValueError(f"Invalid row at {csv_path}:{line_no}: {e}")

    return Individual(genes=genes)


def result_metadata(result: EvolutionResult, domain: Domain,
                    extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the metadata sidecar contents for a run result.

    Args:
        result: Result of an evolution run
        domain: Domain the run used
        extra: Additional entries appended at the end

    Returns:
        Plain dictionary ready for YAML dumping
    """
    metadata = {
        'timestamp': datetime.now().isoformat(),
        'domain': domain.describe(),
        'domain_area': float(domain.area),
        'plants': len(result.best),
        'outcome': result.outcome.value,
        'timed_out': result.timed_out,
        'attempts': result.attempts,
        'elapsed_seconds': round(float(result.elapsed_seconds), 4),
        'fitness': float(result.fitness),
        'penalty': {
            'domain_violations': result.penalty.domain_violations,
            'domain_penalty': float(result.penalty.domain_penalty),
            'overlap_penalty': float(result.penalty.overlap_penalty),
            'overlapping_pairs': result.penalty.pair_count,
            'total': float(result.penalty.total_penalty),
        },
        'seed': result.seed,
        'attempt_reports': [
            {
                'attempt': report.attempt,
                'generations_run': report.generations_run,
                'elapsed_seconds': round(float(report.elapsed_seconds), 4),
                'valid': report.valid,
                'final_best_fitness': (float(report.best_fitness_history[-1])
                                       if report.best_fitness_history else None),
            }
            for report in result.attempt_reports
        ],
    }
    if extra:
        metadata.update(extra)
    return metadata


def save_metadata(
    metadata: dict,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save metadata to YAML sidecar file.

    Args:
        metadata: Metadata dictionary
        output_path: Path for output YAML
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved metadata file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Metadata file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.dump(metadata, f, default_flow_style=False, sort_keys=False)

    return output_path
