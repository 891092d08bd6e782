# cavequest

A small side-scrolling cave platformer built on pygame. The level comes from
a Tiled map (`.tmx`) in infinite-map mode with CSV-encoded chunks. The player
is pushed out of the rectangles in the map's collision object layer. While
the game runs, a translucent red overlay marks the collision tiles.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Playing

```
cavequest
```

The game opens a resizable 800×800 window titled "My Game". It needs three
assets. Their paths are relative to the working directory, and you can
override each one:

| Option           | Default                                 | What it is                                |
|------------------|-----------------------------------------|-------------------------------------------|
| `--map`          | `resources/map.tmx`                     | TMX map file                              |
| `--player-image` | `resources/Heroes/Man/Naked/Idle.png`   | player sprite sheet, four frames in a row |
| `--tileset`      | `resources/Cave Tiles/Cave Tiles.png`   | tileset image, eight tiles per row        |

An asset that cannot be loaded does not stop the game. The failure is logged,
and the game goes on without that asset.

Controls:

- `A` / `D`: move left / right. Releasing the key stops the player.
- `W`: jump.
- Mouse button presses are logged.
- Close the window to quit.

### Map layout

The map's `tilewidth` attribute sets the tile size. The first `<group>` must
hold the following elements:

- a `<layer>` whose `<data>` holds `<chunk>` elements. The map size comes
  from the bounding box of all the chunks.
- an optional `<objectgroup>`. Each of its `<object>` rectangles is rounded
  to whole tiles and marked solid in the collision grid.

## Using it as a library

- `cavequest.world.World(tileset_path)` holds the tile grid (`tiles`) and the
  collision grid (`collision_map`). It provides these methods:
  - `load_from_tmx(filename)` or `load_from_string(text)` load a map.
  - `check_wall_collisions(player, camera_x, camera_y)` pushes the player out
    of the solid tiles it overlaps.
  - `render(surface, camera_x, camera_y, screen_width, screen_height)` draws
    the visible tiles and the collision overlay. It returns a `RenderedFrame`
    that lists the tile and collision rectangles it drew.
  - `is_on_ground()` always returns `True`.
- `cavequest.gameobject.GameObject(x, y, image_path)` is the player sprite.
  It provides these methods:
  - `update(delta_time)` applies gravity and moves the sprite.
  - `set_velocity(dx, dy)` sets the horizontal velocity only.
  - `jump(world)` launches the sprite upwards.
  - `render(surface, camera_x, camera_y)` draws the first frame of the
    sprite sheet.
- `cavequest.game.Game(map_path, player_image_path, tileset_path)` ties these
  together in a window. It provides `init()`, `run()`, `handle_events()`,
  `handle_event(event)`, `update(delta_time)`, `render()` and `cleanup()`.
  `cavequest.game.main(argv=None)` is the entry point of the command.

## What it does not do

- The player sprite is not animated. Only the first frame of the sheet is
  drawn.
- There is no real ground check. The world always reports that the player is
  on the ground, so jumping works in mid-air too.
- There are no enemies, items, score or levels beyond the single map.
- The game does not save anything.