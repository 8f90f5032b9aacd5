"""
Configuration Utilities

Helper functions for exporting and summarizing the lab configuration.
"""

import json
from pathlib import Path

from .settings import SoccerLabConfig


def export_config_to_json(config: SoccerLabConfig, output_path: Path) -> None:
    """
    Export configuration to JSON file

    Args:
        config: SoccerLabConfig instance to export
        output_path: Path where to save the JSON file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(config.model_dump(mode="json"), f, indent=2)


def create_config_template() -> str:
    """JSON template with every option at its default."""
    return SoccerLabConfig().model_dump_json(indent=2)


def format_config_summary(config: SoccerLabConfig) -> str:
    """Human-readable summary of the settings that change results."""
    lines = ["🔧 Soccer SQL Lab Configuration", "=" * 50]

    lines.append("🗄️  Data:")
    lines.append(f"  • CSV directory: {config.data.data_dir}")
    lines.append(f"  • Database: {config.database.path}")

    lines.append("\n🧮 Features:")
    lines.append(f"  • Join strategy: {config.features.join_strategy}")
    lines.append(f"  • Model predictors: {', '.join(config.features.model_predictors)}")

    lines.append("\n✂️  Split:")
    lines.append(f"  • Test size: {config.split.test_size:.0%}")
    lines.append(f"  • CV folds: {config.split.cv_folds}")
    lines.append(f"  • Seed: {config.split.random_seed}")

    low, high = config.knn.neighbors_range
    lines.append("\n📍 KNN:")
    lines.append(f"  • Neighbors: {low}-{high} ({config.knn.levels} levels)")
    lines.append(f"  • Selection metric: {config.knn.selection_metric}")

    lines.append("\n🌲 XGBoost:")
    lines.append(f"  • mtry: {config.xgboost.mtry_range}")
    lines.append(f"  • Trees: {config.xgboost.trees_range}")
    lines.append(f"  • log10 learn rate: {config.xgboost.learn_rate_log10_range}")
    lines.append(f"  • Selection metric: {config.xgboost.selection_metric}")

    lines.append("\n💾 Tuning cache:")
    lines.append(f"  • Use cache: {'On' if config.tuning.use_cache else 'Off'}")
    lines.append(f"  • Write cache: {'On' if config.tuning.write_cache else 'Off'}")

    lines.append("=" * 50)
    return "\n".join(lines)
