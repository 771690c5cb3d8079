"""
convert_model.py — Patch a Keras 3 model.json for TensorFlow.js
----------------------------------------------------------------

Command-line wrapper around `core.model_convert.convert_model_file`.

Usage:
    python -m tools.convert_model                      # patch MODEL_JSON_PATH in place
    python -m tools.convert_model --model path/to/model.json --dry-run
    python -m tools.convert_model --help-convert       # how to produce model.json from model.h5

The first run saves the untouched export next to the model as
`model_original.json`; later runs convert from that backup.
"""

import argparse
import json
import sys
from pathlib import Path

from config.settings import MODEL_BACKUP_NAME, MODEL_JSON_PATH, configure_logging
from core.exception import ModelFormatError
from core.model_convert import convert_model_file

CONVERSION_GUIDE = """
How to get a browser model from model.h5
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

OPTION 1: Google Colab
  !pip install tensorflowjs
  from google.colab import files
  uploaded = files.upload()  # upload model.h5
  !tensorflowjs_converter --input_format=keras model.h5 tfjs_model
  !zip -r tfjs_model.zip tfjs_model
  files.download("tfjs_model.zip")
  Extract to: {target}

OPTION 2: SavedModel
  tensorflowjs_converter --input_format=tf_saved_model \\
    --output_format=tfjs_graph_model ./saved_model {target}

OPTION 3: Local Python
  pip install tensorflowjs tensorflow
  tensorflowjs_converter --input_format=keras model.h5 {target}

Keras 3 exports still need patching afterwards:
  python -m tools.convert_model --model {target}/model.json
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="convert_model",
        description="Convert a Keras 3 model.json to the TensorFlow.js Layers format.",
    )
    parser.add_argument("--model", type=Path, default=MODEL_JSON_PATH, help="model.json to patch")
    parser.add_argument("--backup", type=Path, default=None, help=f"backup file (default: <model dir>/{MODEL_BACKUP_NAME})")
    parser.add_argument("--no-backup", action="store_true", help="neither read nor write a backup")
    parser.add_argument("--dry-run", action="store_true", help="convert and report without writing")
    parser.add_argument("--help-convert", action="store_true", help="print how to produce model.json from model.h5")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("DEBUG" if args.verbose else None)

    if args.help_convert:
        print(CONVERSION_GUIDE.format(target=args.model.parent))
        return 0

    backup = args.backup or args.model.with_name(MODEL_BACKUP_NAME)
    print("🔄 Keras 3 to TensorFlow.js conversion\n")
    try:
        result, summary = convert_model_file(
            args.model,
            backup,
            make_backup=not args.no_backup,
            dry_run=args.dry_run,
        )
    except (FileNotFoundError, ModelFormatError) as e:
        print(f"❌ Error converting model: {e}", file=sys.stderr)
        return 1

    if summary is None:
        print(f"\nDry run: {result.converted_layers} layers would change: {', '.join(result.changed) or 'none'}")
        return 0

    print(f"💾 Saved: {args.model}")
    print("\n📋 Verification:")
    print(f"  First layer: {summary['first_layer']}")
    print(f"  Has batch_input_shape: {summary['has_batch_input_shape']}")
    print(f"  Second layer inbound_nodes: {json.dumps(summary['second_layer_inbound_nodes'])[:100]}")
    print("\n✅ Done! Restart the app to pick up the model.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
