"""Side-scrolling dash: run right, jump the spikes, grab coins, reach the flag."""

import pygame

from game_utils import BaseGame, draw_rect
from intents import ACTION, LEFT, RIGHT, UP

GROUND_Y = 520
PLAYER_SIZE = 32
RUN_SPEED = 260.0
JUMP_SPEED = 620.0
GRAVITY = 1600.0
GOAL_BONUS = 100

SPIKES = (600, 980, 1400, 1460, 1900, 2350, 2800)
COINS = ((420, 420), (800, 380), (1200, 430), (1650, 400), (2100, 380), (2600, 420))

SKY = (18, 22, 40)
GROUND = (40, 90, 60)
PLAYER = (240, 200, 80)
SPIKE = (220, 60, 60)
COIN = (250, 230, 120)
FLAG = (120, 200, 255)


class DashGame(BaseGame):
    game_id = "dash"
    title = "DASH"
    instructions = (
        "LEFT / RIGHT TO RUN, UP OR SPACE TO JUMP",
        "AVOID THE SPIKES, REACH THE FLAG",
        "PRESS SPACE OR TAP A TO START",
    )
    view_size = (960, 600)
    world_size = (3200, 600)
    background = SKY

    def reset(self):
        super().reset()
        self.x = 80.0
        self.y = float(GROUND_Y - PLAYER_SIZE)
        self.vy = 0.0
        self.on_ground = True
        self.coins = set()
        self.furthest = self.x
        self.finished = False

    def player_rect(self):
        return pygame.Rect(int(self.x), int(self.y), PLAYER_SIZE, PLAYER_SIZE)

    def update(self, intents, dt):
        super().update(intents, dt)
        if intents[LEFT] and not intents[RIGHT]:
            self.x -= RUN_SPEED * dt
        elif intents[RIGHT] and not intents[LEFT]:
            self.x += RUN_SPEED * dt
        self.x = max(0.0, min(self.x, self.world_size[0] - PLAYER_SIZE))

        if self.on_ground and (intents[UP] or intents[ACTION]):
            self.vy = -JUMP_SPEED
            self.on_ground = False
        self.vy += GRAVITY * dt
        self.y += self.vy * dt
        if self.y >= GROUND_Y - PLAYER_SIZE:
            self.y = float(GROUND_Y - PLAYER_SIZE)
            self.vy = 0.0
            self.on_ground = True

        self.furthest = max(self.furthest, self.x)
        body = self.player_rect()
        for i, (cx, cy) in enumerate(COINS):
            if i not in self.coins and body.colliderect(pygame.Rect(cx, cy, 20, 20)):
                self.coins.add(i)
        self.score = len(self.coins) * 10 + int(self.furthest // 50)

        for sx in SPIKES:
            if body.colliderect(pygame.Rect(sx, GROUND_Y - 24, 28, 24)):
                return False
        if self.x >= self.world_size[0] - 80 - PLAYER_SIZE:
            self.finished = True
            self.score += GOAL_BONUS
            return False
        return True

    def result_line(self):
        return "GOAL REACHED!" if self.finished else None

    def focus(self):
        return (self.x + PLAYER_SIZE / 2.0, self.y + PLAYER_SIZE / 2.0)

    def draw(self, display, offset):
        ox, oy = offset
        width, height = self.world_size
        draw_rect(display, (ox, GROUND_Y + oy, width, height - GROUND_Y), GROUND)
        for sx in SPIKES:
            draw_rect(display, (sx + ox, GROUND_Y - 24 + oy, 28, 24), SPIKE)
        for i, (cx, cy) in enumerate(COINS):
            if i not in self.coins:
                draw_rect(display, (cx + ox, cy + oy, 20, 20), COIN)
        draw_rect(display, (width - 80 + ox, GROUND_Y - 120 + oy, 12, 120), FLAG)
        draw_rect(display, (self.x + ox, self.y + oy, PLAYER_SIZE, PLAYER_SIZE), PLAYER)
