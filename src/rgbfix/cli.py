import logging
from pathlib import Path

import click

from . import config, patcher, rom_utils


def _unquote(ctx, param, value):
    # Shell wrappers sometimes pass 'quoted' values through verbatim
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        return value[1:-1]
    return value


@click.group()
def main():
    """Game Boy ROM header utility and checksum fixer."""
    pass


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-C", "--color-only", is_flag=True, help="Set the CGB flag (0x143) to 0xC0 (CGB only)")
@click.option("-c", "--color-compatible", is_flag=True, help="Set the CGB flag (0x143) to 0x80 (CGB compatible)")
@click.option("-f", "--fix-spec", callback=_unquote, help="Fix header values: l=logo, h=header checksum, g=global checksum")
@click.option("-i", "--game-id", callback=_unquote, help="Set the 4-character game ID (0x13F-0x142)")
@click.option("-j", "--non-japanese", is_flag=True, help="Set the destination code (0x14A) to 0x01")
@click.option("-k", "--new-licensee", callback=_unquote, help="Set the 2-character new licensee (0x144-0x145)")
@click.option("-l", "--old-licensee", callback=_unquote, help="Set the old licensee code (0x14B), e.g. 0x33")
@click.option("-m", "--mbc-type", callback=_unquote, help="Set the cartridge type (0x147) by number or name, e.g. MBC5+RAM+BATTERY")
@click.option("-n", "--rom-version", callback=_unquote, help="Set the ROM version (0x14C)")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="Write the fixed ROM here instead of in place")
@click.option("-p", "--pad-value", callback=_unquote, help="Pad the ROM to a valid size with this byte")
@click.option("-r", "--ram-size", callback=_unquote, help="Set the RAM size code (0x149)")
@click.option("-s", "--sgb-compatible", is_flag=True, help="Set the SGB flag (0x146) to 0x03; needs old licensee 0x33")
@click.option("-t", "--title", callback=_unquote, help="Set the title (0x134-0x143)")
@click.option("-v", "--validate", is_flag=True, help="Equivalent to -f lhg")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="YAML fix profile; options given here override it")
@click.option("-V", "--verbose", count=True, help="Log progress (-V info, -VV debug)")
def fix(files, output, config_path, verbose, **options):
    """Patch the header of one or more ROM files."""
    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level={0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG),
    )
    if output is not None and len(files) > 1:
        raise click.UsageError("--output can only be used with a single input file")

    profile = None
    if config_path:
        try:
            profile = config.load_profile(config_path)
        except config.ConfigError as e:
            raise click.BadParameter(str(e), param_hint="--config")
    directives = config.build_directives(profile, **options)

    failed = 0
    for path in files:
        try:
            data = rom_utils.read_rom_bytes(path)
        except OSError as e:
            click.echo(f"error: {path.name}: {e}", err=True)
            failed += 1
            continue
        result = patcher.patch(data, directives)
        for warning in result.warnings:
            click.echo(f"warning: {path.name}: {warning}", err=True)
        if not result.ok:
            click.echo(f"error: {path.name}: {result.message()}", err=True)
            failed += 1
            continue
        out = output or path
        try:
            rom_utils.write_rom_bytes(out, result.image)
        except OSError as e:
            click.echo(f"error: {path.name}: {e}", err=True)
            failed += 1
            continue
        click.echo(f"Fixed ROM written to: {out}")

    if failed:
        raise click.exceptions.Exit(1)


@main.command()
@click.option("--rom", type=click.Path(exists=True, dir_okay=False), required=True, help="Path to ROM")
def verify(rom):
    """Print the ROM header and check its logo and checksums."""
    info = rom_utils.inspect_rom(rom)
    click.echo(f"Size: {info['size']} bytes")
    click.echo(f"CRC32: {info['crc32']:08X}")
    if info.get("warning"):
        click.echo(f"Warning: {info['warning']}")
    if info.get("header_error"):
        raise click.ClickException(info["header_error"])
    hdr = info["header"]
    click.echo("Header:")
    click.echo(f"  Title: {hdr['title']}")
    click.echo(f"  Game ID: {hdr['game_id']!r}  New licensee: {hdr['new_licensee']!r}  Old licensee: 0x{hdr['old_licensee']:02X}")
    click.echo(f"  CGB: {hdr['cgb_support']} (flag=0x{hdr['cgb_flag']:02X})  SGB flag: 0x{hdr['sgb_flag']:02X}")
    click.echo(f"  Cart: {hdr['cartridge_type_name']} (0x{hdr['cartridge_type']:02X})")
    if hdr.get("rom_size_expected"):
        click.echo(f"  Declared ROM size: {hdr['rom_size_expected']} bytes (code 0x{hdr['rom_size_code']:02X})")
    if hdr.get("ram_size_expected") is not None:
        click.echo(f"  Declared RAM size: {hdr['ram_size_expected']} bytes (code 0x{hdr['ram_size_code']:02X})")
    click.echo(f"  Destination: 0x{hdr['destination_code']:02X}  Version: 0x{hdr['version']:02X}")
    click.echo(f"  Logo: {'ok' if hdr['logo_ok'] else 'MISMATCH'}")
    click.echo(f"  Header checksum: calc=0x{hdr['header_checksum_calc']:02X}, stored=0x{hdr['header_checksum']:02X}")
    click.echo(f"  Global checksum: calc=0x{hdr['global_checksum_calc']:04X}, stored=0x{hdr['global_checksum']:04X}")
    if info.get("header_warning"):
        click.echo(f"Warning: {info['header_warning']}")
        raise click.exceptions.Exit(1)


if __name__ == "__main__":
    main()
