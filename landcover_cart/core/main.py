"""
Main landcover_cart class running the complete classification workflow.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import folium
import geopandas as gpd
import matplotlib.pyplot as plt
import pandas as pd

from ..config import ConfigManager
from ..data import loader
from ..exceptions import DataError, LandcoverCartError
from ..ML import cart_workflow
from ..ML import misclassification as errors
from ..ML.cart_workflow import DatasetSplits, EvaluationResult, TrainedModel
from ..ML.encoding import LabelEncoding, drop_unmapped, encode_dataset
from ..utils.path_resolver import PathResolver
from ..visualization import legend as legends
from ..visualization.map_builder import build_map, save_map, style_points
from ..visualization.palette import Palette
from ..visualization.plots import plot_confusion_matrix, plot_feature_importances
from ..visualization.query import find_nearest
from .. import __version__
from .report import save_report

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything produced by one run of :meth:`LandcoverCartAnalysis.run`."""

    dataset: gpd.GeoDataFrame
    encoding: LabelEncoding
    splits: DatasetSplits
    model: TrainedModel
    evaluation: EvaluationResult
    training_counts: Dict[str, int]
    feature_importances: Dict[str, float]
    class_palette: Palette
    error_palette: Palette
    class_legend: legends.Legend
    error_legend: legends.Legend
    classified_styled: gpd.GeoDataFrame
    error_styled: gpd.GeoDataFrame
    error_descriptors: Tuple[str, ...]
    map: Optional[folium.Map] = None
    config_hash: str = ""
    outputs: Dict[str, str] = field(default_factory=dict)


class LandcoverCartAnalysis:
    """
    Supervised land cover classification of labelled sample points with CART.

    The workflow is a single pass:
    1. Load the sample table, filter by bounds and year, one row per plot
    2. Encode labels once, on the filtered table
    3. Seeded random train/test split
    4. Fit a CART classifier on the training partition
    5. Classify the testing partition and compute accuracy statistics
    6. Style points, build legends and the interactive map, write outputs

    Any failing step raises a LandcoverCartError subclass and stops the run.
    """

    def __init__(self, config_path: Optional[Union[str, Path, Dict]] = None):
        """
        Initialize the analysis.

        Args:
            config_path: Path to configuration file, config dict, or None for defaults
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.config_manager = ConfigManager(config_path)
        self.config_manager.require_valid()
        self.path_resolver = PathResolver()
        self._last_result: Optional[AnalysisResult] = None

    @property
    def config(self) -> Dict[str, Any]:
        return self.config_manager.config

    @property
    def last_result(self) -> Optional[AnalysisResult]:
        return self._last_result

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #
    def load(self, dataset_path: Optional[Union[str, Path]] = None) -> gpd.GeoDataFrame:
        """Read the sample table and apply the bounds, year and plot filters."""
        data_cfg = self.config_manager.get_data_config()
        dataset_path = dataset_path or data_cfg.get("path")
        if not dataset_path:
            raise DataError("No dataset path given (argument or data.path in config)")

        path = self.path_resolver.resolve_data_path(dataset_path)
        gdf = loader.read_dataset(
            path,
            geometry_column=data_cfg["geometry_column"],
            lon_column=data_cfg["lon_column"],
            lat_column=data_cfg["lat_column"],
            crs=data_cfg["crs"],
        )
        return self.filter(gdf)

    def filter(self, gdf: Union[gpd.GeoDataFrame, pd.DataFrame]) -> gpd.GeoDataFrame:
        """Filter an in-memory table; plain DataFrames are geolocated first."""
        data_cfg = self.config_manager.get_data_config()
        if not isinstance(gdf, gpd.GeoDataFrame):
            gdf = loader.frame_to_geodataframe(
                gdf,
                geometry_column=data_cfg["geometry_column"],
                lon_column=data_cfg["lon_column"],
                lat_column=data_cfg["lat_column"],
                crs=data_cfg["crs"],
            )
        loader.validate_columns(gdf, [data_cfg["label_column"]])
        return loader.filter_dataset(
            gdf,
            bounds=data_cfg.get("bounds"),
            year=data_cfg.get("year"),
            year_column=data_cfg["year_column"],
            plot_id_column=data_cfg["plot_id_column"],
        )

    def encode(self, dataset: gpd.GeoDataFrame) -> Tuple[gpd.GeoDataFrame, LabelEncoding]:
        """
        Derive the label encoding from the filtered table and apply it.

        The encoding is computed once here and reused for both partitions.
        """
        label_column = self.config_manager.get("data.label_column")
        encoding = LabelEncoding.fit(
            dataset[label_column], order=self.config_manager.get("encoding.order")
        )
        self.logger.info(f"Unique '{label_column}' values: {list(encoding.labels)}")
        self.logger.info(f"Landcover classes: {encoding.to_dict()}")

        encoded = encode_dataset(
            dataset,
            encoding,
            label_column=label_column,
            target_column=self.config_manager.get("encoding.target_column"),
        )
        return encoded, encoding

    def prepare(self, encoded: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        """Apply the unmapped label and missing predictor policies."""
        prepared = drop_unmapped(
            encoded,
            target_column=self.config_manager.get("encoding.target_column"),
            drop=self.config_manager.get("encoding.drop_unmapped"),
        )
        return loader.handle_missing_predictors(
            prepared,
            self.config_manager.get("ml.predictors"),
            policy=self.config_manager.get("data.missing_predictors"),
        )

    def split(self, prepared: gpd.GeoDataFrame) -> DatasetSplits:
        split_cfg = self.config_manager.get("split")
        return cart_workflow.split_dataset(
            prepared,
            train_fraction=split_cfg["train_fraction"],
            seed=split_cfg["seed"],
            random_column=split_cfg["random_column"],
        )

    def train(self, training: gpd.GeoDataFrame, encoding: LabelEncoding) -> TrainedModel:
        ml_cfg = self.config_manager.get_ml_config()
        return cart_workflow.train_cart_model(
            training,
            predictors=ml_cfg["predictors"],
            class_property=self.config_manager.get("encoding.target_column"),
            encoding=encoding,
            params=cart_workflow.cart_params(ml_cfg),
            seed=self.config_manager.get("split.seed"),
        )

    def evaluate(self, model: TrainedModel, testing: gpd.GeoDataFrame) -> EvaluationResult:
        return cart_workflow.evaluate_model(
            model, testing, output_column=self.config_manager.get("ml.output_column")
        )

    def _error_transitions(self) -> List[Tuple[str, str]]:
        transitions = self.config_manager.get("visualization.transitions") or []
        return [tuple(pair) for pair in transitions]

    def visualize(
        self,
        evaluation: EvaluationResult,
        encoding: LabelEncoding,
    ) -> Dict[str, Any]:
        """
        Style classified and misclassified points and build both legends.

        Returns a dict with palettes, legends, styled layers, the displayed
        misclassification descriptors and the folium map.
        """
        vis_cfg = self.config_manager.get_visualization_config()
        target = self.config_manager.get("encoding.target_column")

        class_palette = Palette.for_encoding(
            encoding, vis_cfg.get("class_colors"), vis_cfg.get("fallback_colors", ())
        )
        classified_styled = style_points(
            evaluation.classified,
            class_palette,
            code_column=target,
            point_size=vis_cfg["point_size"],
            width=vis_cfg["point_width"],
        )

        error_palette = Palette.from_colors(vis_cfg["error_palette"])
        selected, descriptors = errors.select_transitions(
            evaluation.misclassified,
            transitions=self._error_transitions(),
            encoding=encoding,
            limit=len(error_palette),
        )
        error_points, _ = errors.encode_transitions(selected, descriptors)
        error_styled = style_points(
            error_points,
            error_palette,
            code_column="misclass_type",
            point_size=vis_cfg["point_size"],
            width=vis_cfg["point_width"],
        )

        class_legend = legends.class_legend(class_palette, position=vis_cfg["legend_position"])
        error_legend = legends.error_legend(
            descriptors, error_palette, position=vis_cfg["legend_position"]
        )

        fmap = build_map(
            classified_styled,
            error_styled,
            legends=[class_legend, error_legend],
            center=vis_cfg.get("map_center"),
            zoom_start=vis_cfg["zoom_start"],
        )
        return {
            "class_palette": class_palette,
            "error_palette": error_palette,
            "class_legend": class_legend,
            "error_legend": error_legend,
            "classified_styled": classified_styled,
            "error_styled": error_styled,
            "error_descriptors": tuple(descriptors),
            "map": fmap,
        }

    # ------------------------------------------------------------------ #
    # Full run
    # ------------------------------------------------------------------ #
    def run(
        self,
        dataset_path: Optional[Union[str, Path]] = None,
        dataset: Optional[Union[gpd.GeoDataFrame, pd.DataFrame]] = None,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> AnalysisResult:
        """
        Run the complete workflow.

        Args:
            dataset_path: Sample table to read; defaults to data.path in config
            dataset: Already loaded table (GeoDataFrame or DataFrame), filtered like a file
            output_dir: Directory for outputs; defaults to output.output_directory

        Returns:
            AnalysisResult
        """
        self.logger.info("=" * 60)
        self.logger.info("Land cover CART analysis")
        self.logger.info("=" * 60)

        try:
            filtered = self.filter(dataset) if dataset is not None else self.load(dataset_path)
            if filtered.empty:
                raise DataError("No records matched the spatial and year filter")

            encoded, encoding = self.encode(filtered)
            prepared = self.prepare(encoded)
            if prepared.empty:
                raise DataError("No records left after removing unusable rows")

            splits = self.split(prepared)
            label_column = self.config_manager.get("data.label_column")
            training_counts = errors.aggregate_histogram(splits.training, label_column)
            self.logger.info(f"Training points per class: {training_counts}")

            model = self.train(splits.training, encoding)
            if splits.testing.empty:
                raise DataError("Testing set is empty; nothing to evaluate")
            evaluation = self.evaluate(model, splits.testing)
            visuals = self.visualize(evaluation, encoding)
        except LandcoverCartError as e:
            self.logger.error(f"Analysis failed: {e}")
            raise

        result = AnalysisResult(
            dataset=filtered,
            encoding=encoding,
            splits=splits,
            model=model,
            evaluation=evaluation,
            training_counts={str(k): v for k, v in training_counts.items()},
            feature_importances=cart_workflow.feature_importances(model),
            config_hash=cart_workflow.hash_config(self.config),
            **visuals,
        )

        output_dir = output_dir or self.config_manager.get("output.output_directory")
        if output_dir:
            result.outputs = self.save_outputs(result, output_dir)

        self._last_result = result
        self.logger.info("Land cover CART analysis completed")
        return result

    def save_outputs(self, result: AnalysisResult, output_dir: Union[str, Path]) -> Dict[str, str]:
        """Write the enabled outputs and return their paths by kind."""
        out_cfg = self.config_manager.get("output")
        output_dir = self.path_resolver.ensure_output_dir(output_dir)
        outputs = {}

        if out_cfg.get("save_report"):
            outputs["report"] = str(save_report(result, output_dir / "report.json"))
            names = {code: result.encoding.decode(code) for code in result.evaluation.confusion.labels}
            cm_path = output_dir / "confusion_matrix.csv"
            result.evaluation.confusion.to_dataframe(names).to_csv(cm_path)
            outputs["confusion_matrix"] = str(cm_path)

        if out_cfg.get("save_predictions"):
            predictions_path = output_dir / "classified_points.csv"
            classified = result.evaluation.classified
            table = pd.DataFrame(classified.drop(columns=classified.geometry.name))
            points = classified.geometry.representative_point()
            table["longitude"] = points.x
            table["latitude"] = points.y
            table.to_csv(predictions_path, index=False)
            outputs["predictions"] = str(predictions_path)

        if out_cfg.get("save_map") and result.map is not None:
            outputs["map"] = str(save_map(result.map, output_dir / "map.html"))

        if out_cfg.get("save_model"):
            outputs["model"] = cart_workflow.save_model(result.model, str(output_dir / "model.joblib"))

        if out_cfg.get("save_confusion_plot"):
            names = {code: result.encoding.decode(code) for code in result.evaluation.confusion.labels}
            fig, _ = plot_confusion_matrix(result.evaluation.confusion, names)
            plot_path = output_dir / "confusion_matrix.png"
            fig.savefig(plot_path, dpi=150)
            plt.close(fig)
            outputs["confusion_plot"] = str(plot_path)

        if out_cfg.get("save_importance_plot") and result.feature_importances:
            fig, _ = plot_feature_importances(result.feature_importances)
            plot_path = output_dir / "feature_importance.png"
            fig.savefig(plot_path, dpi=150)
            plt.close(fig)
            outputs["importance_plot"] = str(plot_path)

        self.logger.info(f"Outputs written to: {output_dir}")
        return outputs

    # ------------------------------------------------------------------ #
    # Point query
    # ------------------------------------------------------------------ #
    def query_point(
        self,
        lon: float,
        lat: float,
        result: Optional[AnalysisResult] = None,
        radius_m: Optional[float] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Attributes of the classified test point nearest to (lon, lat).

        Returns None when no point lies within the query radius.
        """
        result = result or self._last_result
        if result is None:
            raise LandcoverCartError("No analysis result to query; call run() first")
        if radius_m is None:
            radius_m = self.config_manager.get("visualization.query_radius_m")
        record = find_nearest(result.classified_styled, (lon, lat), radius_m=radius_m)
        if record is not None:
            self.logger.info(f"Clicked point properties: {record}")
        return record

    def get_system_info(self) -> Dict[str, Any]:
        return {
            'version': __version__,
            'has_result': self._last_result is not None,
            'config': self.config,
        }

    def __repr__(self) -> str:
        return f"LandcoverCartAnalysis(project={self.config_manager.get('project.name')})"
