"""
Default configuration for landcover_cart library.
"""

DEFAULT_CONFIG = {
    # Project configuration
    "project": {
        "name": "landcover_cart_project",
        "description": "CART land cover classification of labelled sample points",
        "version": "1.0.0"
    },

    # Input table configuration
    "data": {
        "path": None,  # Will be set by user
        "plot_id_column": "plotid",
        "year_column": "image_year",
        "label_column": "dominant_landcover",
        "geometry_column": ".geo",  # GeoJSON column written by table exports
        "lon_column": "longitude",
        "lat_column": "latitude",
        "crs": "EPSG:4326",
        "year": 2018,
        # Continental US with a buffer: [min_lon, min_lat, max_lon, max_lat]
        "bounds": [-130, 24, -65, 50],
        "missing_predictors": "drop"  # drop, error
    },

    # Label encoding configuration
    "encoding": {
        "order": "first_seen",  # first_seen, sorted
        "target_column": "landcover",
        "drop_unmapped": True
    },

    # Train/test split configuration
    "split": {
        "train_fraction": 0.7,
        "seed": 42,
        "random_column": "random"
    },

    # Machine Learning configuration
    "ml": {
        "algorithm": "cart",
        "predictors": [
            "NDVI", "SR_B1", "SR_B2", "SR_B3", "SR_B4", "SR_B5", "SR_B7",
            "elevation_meters"
        ],
        "output_column": "classification",
        "cart": {
            "criterion": "gini",
            "max_depth": None,
            "min_samples_split": 2,
            "min_samples_leaf": 1,
            "max_leaf_nodes": None
        }
    },

    # Map and legend configuration
    "visualization": {
        "class_colors": {
            "Water": "mediumblue",
            "Grass/forb/herb": "deepskyblue",
            "Trees": "springgreen",
            "Shrubs": "mediumslateblue",
            "Barren": "mediumseagreen",
            "Impervious": "darkcyan",
            "Snow/ice": "lightcyan"
        },
        "fallback_colors": [
            "mediumblue", "deepskyblue", "springgreen", "mediumslateblue",
            "mediumseagreen", "darkcyan", "lightcyan", "slategray",
            "olive", "teal"
        ],
        "error_palette": [
            "crimson", "darkorange", "peachpuff", "gold", "yellow",
            "deeppink", "lightcyan"
        ],
        # Transitions shown on the error layer, as [actual, predicted] label
        # pairs. Empty means the most frequent ones up to the palette size.
        "transitions": [
            ["Grass/forb/herb", "Trees"],
            ["Trees", "Grass/forb/herb"],
            ["Trees", "Shrubs"],
            ["Shrubs", "Trees"],
            ["Trees", "Barren"],
            ["Barren", "Trees"]
        ],
        "point_size": 6,
        "point_width": 0.5,
        "query_radius_m": 9000,
        "map_center": None,  # [lat, lon]; None centres on the data
        "zoom_start": 4,
        "legend_position": "bottom-left"
    },

    # Output configuration
    "output": {
        "output_directory": None,  # Nothing is written when None
        "save_map": True,
        "save_report": True,
        "save_predictions": True,
        "save_model": False,
        "save_confusion_plot": False,
        "save_importance_plot": False
    },

    # Logging configuration
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "file": None,  # Log to file if specified
        "console": True
    }
}
