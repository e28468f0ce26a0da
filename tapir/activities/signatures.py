"""Signatures shown by the companion activity."""

import random
from typing import Optional, Sequence

SIGNATURES = (
    "貘婆婆衔月华织梦，星辉铺就童话路。",
    "枕畔月光永不老，貘婆婆的绒尾扫过千年梦。",
    "貘婆婆掌灯星河渡，每颗星子都是未说完的梦。",
    "晨露凝着昨夜童话，貘婆婆的茶炊正温在梦的转角。",
    "貘婆婆的绒毯盖过春樱冬雪，每个辗转都有月光针脚。",
    "貘婆婆的纺车卷着流云，把心事纺成会飞的绒毛毯。",
    "寄往梦境的明信片，盖着貘婆婆的萤火邮戳。",
    "貘婆婆收集晨露的棱角，折射出七重梦境叠影。",
    "沉入鲸骨化作的梦珊瑚，貘婆婆提着灯笼打捞月光标本。",
    "貘婆婆折的梦纸鹤，正衔着童年星光逆流飞来。",
    "貘婆婆拉开晨雾帷幕，昨夜的梦正在露珠荧幕重播。",
    "当貘婆婆吹散蒲公英，绒毛种子便化作梦的计时沙漏。",
    "貘婆婆把碎梦煅烧成釉，月光在瓷纹里缓缓流动。",
    "貘婆婆在雨霁处煮梦，虹桥那头晾着晒满故事的被褥。",
    "貘婆婆的竹帚扫过星阶，落叶都是闪着微光的未完之梦。",
    "貘婆衔月补梦褶，星梭穿云织忆帘。",
    "貘婆扫尾拾呓语，茶烟袅结昨夜萤。",
    "貘婆砚池写蜃楼，尾卷藏尽鹊桥星。",
    "貘婆银针串时砂，蒲扇摇散雾中剧。",
    "貘婆拾捡前生露，炉烟熏醒忘川萤。",
    "貘婆帚扫星屑屉，绒毯裹紧梦呓匣。",
    "貘婆虹勺舀梦露，锦匣封存未央诗。",
    "貘婆临摹鲛人泪，陶窑烧制童谣星。",
    "貘婆莲灯引迷梦，蛛网黏合碎月痕。",
    "貘婆藤箱压三更，蚌壳孕养半醒虹。",
    "貘婆雾绡裹仙枕，星钥解开云纹谜。",
    "貘婆茧房孵梦鹊，蛛丝拓印将逝霞。",
    "貘婆打捞前世画，竹筛滤净今宵魇。",
    "貘婆冰砚冻蝶影，暖炉焙开枕上书。",
    "貘婆苔枕浸千年，尾扫星河万卷光。",
)

FALLBACK_SIGNATURE = "貘婆婆与你同在"

class SignatureSource:
    """Uniform random pick from a fixed, read-only corpus."""

    def __init__(self, corpus: Sequence[str] = SIGNATURES,
                 fallback: str = FALLBACK_SIGNATURE,
                 rng: Optional[random.Random] = None):
        self.corpus = tuple(corpus)
        self.fallback = fallback
        self._rng = rng or random.Random()

    def pick(self) -> str:
        if not self.corpus:
            return self.fallback
        return self._rng.choice(self.corpus)

    def __contains__(self, signature: str) -> bool:
        return signature in self.corpus or signature == self.fallback

    def __len__(self) -> int:
        return len(self.corpus)
