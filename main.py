"""
Lanczos Resize Studio
Gamma-aware Lanczos-2 resizing of BMP and raw YUV 4:2:0 images and sequences
"""

import logging
import sys
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

USAGE = """\
Usage: python main.py [options] <source_file> <dest_file>

Required parameters (must follow options):
  source_file: Source image, raw YUV 4:2:0 (.yuv) or 24-bit BMP (.bmp)
  dest_file:   Destination image, raw YUV 4:2:0 (.yuv) or 24-bit BMP (.bmp)

Options:
  -g <gamma>     Gamma value. 1.0 keeps samples as they are. Default = 2.2
  -r[0|1|2]      Scaling ratio: -r1 upscale 2x (default), -r2 shrink 1/2x, -r0 copy 1x
  -w <width>     Width in pixels. MUST be given for YUV input
  -h <height>    Height in lines. MUST be given for YUV input
  -y <format>    YUV layout: 0 = I420 (default), 1 = YV12, 2 = NV12, 3 = NV21
  -e <edge>      Edge handling: repeat (default), mirror, nocontrib
  --reference <path>  Report PSNR/SSIM of each output frame against this image
  -v             Verbose logging

Examples:
  python main.py -g 1.8 -w 528 -h 488 -r2 a_528x488.yuv a_264x244.yuv
      Shrink I420 input by half with gamma 1.8
  python main.py -g 1.0 -r1 birds.bmp birds_352x288.yuv
      Expand a QCIF bmp by 2x without gamma compensation, output I420
"""

SCALE_RATIOS = {'0': 1.0, '1': 2.0, '2': 0.5}


class UsageError(Exception):
    """Command line could not be parsed."""


def _option_value(args: List[str], index: int, name: str) -> str:
    if index >= len(args):
        raise UsageError(f"Option {name} needs a value")
    return args[index]


def parse_args(args: List[str]) -> Tuple[dict, str, str, Optional[str], bool]:
    """Parse options, returning (ResizeParams kwargs, input, output, reference, verbose)."""
    from utils.file_info import YUV_TYPE_CODES

    kwargs = {}
    reference = None
    verbose = False
    i = 0
    while i < len(args) and args[i].startswith('-'):
        arg = args[i]
        if arg == '--help':
            raise UsageError("")
        if arg == '--reference':
            i += 1
            reference = _option_value(args, i, arg)
        elif arg.startswith('-r'):
            ratio = SCALE_RATIOS.get(arg[2:])
            if ratio is None:
                raise UsageError(f"Unrecognized scaling ratio: {arg}")
            kwargs['scale_ratio'] = ratio
        elif arg in ('-w', '-h'):
            i += 1
            value = _option_value(args, i, arg)
            if not value.isdigit() or int(value) == 0:
                raise UsageError(f"Unrecognized {'width' if arg == '-w' else 'height'}: {value}")
            kwargs['width' if arg == '-w' else 'height'] = int(value)
        elif arg == '-g':
            i += 1
            value = _option_value(args, i, arg)
            try:
                kwargs['gamma'] = float(value)
            except ValueError:
                raise UsageError(f"Unrecognized gamma: {value}")
        elif arg == '-y':
            i += 1
            value = _option_value(args, i, arg)
            if not value.isdigit() or int(value) not in YUV_TYPE_CODES:
                raise UsageError(f"Unrecognized YUV color format: {value}")
            kwargs['yuv_type'] = YUV_TYPE_CODES[int(value)]
        elif arg == '-e':
            i += 1
            kwargs['edge_method'] = _option_value(args, i, arg).lower()
        elif arg == '-v':
            verbose = True
        else:
            raise UsageError(f"Unrecognized option: {arg}")
        i += 1

    if len(args) < i + 2:
        raise UsageError("Missing required parameters")
    return kwargs, args[i], args[i + 1], reference, verbose


def run(args: List[str]) -> int:
    """Resize every frame of the input; returns the process exit status."""
    from engines.gamma import GammaTables
    from engines.pipeline import resize_image
    from models.image import create_image
    from models.resize_params import ResizeParams
    from utils.file_info import ImageFileInfo, frame_filename, get_file_info
    from utils.image_io import (
        load_bmp, save_bmp, load_raw_yuv, save_raw_yuv, load_image, image_to_array
    )
    from utils.metrics import compute_psnr_ssim, Timer

    try:
        kwargs, in_path, out_path, reference_path, verbose = parse_args(args)
        params = ResizeParams(**kwargs)
    except (UsageError, ValueError) as e:
        if str(e):
            print(e, file=sys.stderr)
        print(USAGE)
        return 1

    logging.getLogger().setLevel(logging.DEBUG if verbose else logging.INFO)

    in_info = ImageFileInfo(in_path, yuv_type=params.yuv_type, width=params.width, height=params.height)
    out_info = ImageFileInfo(out_path, yuv_type=params.yuv_type)
    try:
        get_file_info(in_info, out_info)
        out_w, out_h = params.output_size(in_info.width, in_info.height)
        reference = load_image(reference_path) if reference_path else None
    except ValueError as e:
        logger.error(str(e))
        return 1

    # Only 4:2:0 raw input is supported
    color_space = 'YUV420' if in_info.file_type == 'yuv' else 'RGB'

    image_out = create_image(color_space, out_w, out_h)
    linear_in = create_image(color_space, in_info.width, in_info.height, 'double')
    linear_out = create_image(color_space, out_w, out_h, 'double')
    tables = GammaTables.build(params.gamma)

    logger.info(
        f"Resizing {in_info.width}x{in_info.height} -> {out_w}x{out_h} "
        f"(gamma {params.gamma}, edge {params.edge_method})"
    )

    written = set()
    out_frame = in_info.start_frame
    for i in range(in_info.num_frames):
        frame_path = in_info.frame_path(i)
        for sub_frame in range(in_info.num_sub_frames):
            try:
                if in_info.file_type == 'yuv':
                    image_in = load_raw_yuv(frame_path, in_info.width, in_info.height,
                                            sub_frame, in_info.yuv_type, color_space)
                else:
                    image_in = load_bmp(frame_path, color_space)
            except (OSError, ValueError) as e:
                # Skip unreadable frames and carry on with the sequence
                logger.warning(f"Skipping frame {out_frame}: {e}")
                out_frame += 1
                continue

            timer = Timer()
            if not resize_image(image_in, image_out, params.edge_method, tables,
                                linear_in, linear_out, timer):
                return 1

            if in_info.is_multiframe:
                target = frame_filename(out_info.base_name, out_frame, out_info.extension)
            else:
                target = out_info.filename
            try:
                if out_info.file_type == 'yuv':
                    save_raw_yuv(target, image_out, out_info.yuv_type, append=target in written)
                else:
                    save_bmp(target, image_out)
            except (OSError, ValueError) as e:
                logger.error(f"Unable to write {target}: {e}")
                return 1
            written.add(target)
            logger.info(f"Frame {out_frame}: wrote {target} in {timer.total_ms:.2f} ms")

            if reference is not None:
                try:
                    metrics = compute_psnr_ssim(reference, image_to_array(image_out))
                except ValueError as e:
                    logger.warning(f"Frame {out_frame}: no metrics: {e}")
                else:
                    logger.info(
                        f"Frame {out_frame}: PSNR (Y) {metrics['psnr_y']:.2f} dB, "
                        f"SSIM (Y) {metrics['ssim_y']:.4f}"
                    )
            out_frame += 1

    return 0


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        status = run(sys.argv[1:])
    except MemoryError:
        logger.critical("Could not allocate image memory")
        status = 1
    sys.exit(status)


if __name__ == '__main__':
    main()
