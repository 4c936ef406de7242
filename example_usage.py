"""
Example usage of the Landcover CART workflow.

This script demonstrates how to use the run method to classify a table of
labelled sample points, assess the classifier and inspect a location.
"""

import os
import sys

from landcover_cart import LandcoverCartAnalysis, LandcoverCartError
from landcover_cart.core import print_report
from landcover_cart.utils import setup_logging


def main():
    """
    Example usage of the Landcover CART workflow.
    """
    # Dataset exported from the sample collection (adjust path as needed)
    dataset_path = sys.argv[1] if len(sys.argv) > 1 else os.path.join(os.getcwd(), 'samples.csv')

    config = {
        'data': {
            'year': 2018,
            'bounds': [-130, 24, -65, 50],
        },
        'split': {
            'train_fraction': 0.7,
            'seed': 42,
        },
        'ml': {
            'cart': {'max_depth': 12},  # None grows the full tree
        },
        'output': {
            'output_directory': './landcover_cart_output',
            'save_model': True,
            'save_confusion_plot': True,
        },
    }

    analysis = LandcoverCartAnalysis(config)
    setup_logging(analysis.config_manager.get('logging'))

    # Run the workflow
    try:
        print("Starting land cover CART analysis...")
        result = analysis.run(dataset_path)
    except LandcoverCartError as e:
        print(f"ERROR: Workflow failed: {e}")
        raise

    print("\n✅ Workflow completed successfully!")
    print_report(result)

    # Files written to the output directory
    print("\n📁 Outputs:")
    for kind, path in result.outputs.items():
        print(f"  {kind}: {path}")

    # Inspect the classified test point nearest to a location (9 km radius)
    print("\n📍 Point query:")
    record = analysis.query_point(-98.5, 39.5)
    if record is None:
        print("  No feature found near the clicked location.")
    else:
        for key in ('plotid', 'dominant_landcover', 'landcover', 'classification'):
            print(f"  {key}: {record.get(key)}")

    return result


if __name__ == '__main__':
    main()
